"""Image Relay — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, and the static single-page-application serving.

Modules
-------
main
    FastAPI application factory, route handlers, and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response validation.
spa
    Static file serving with entry-page fallback for client-side routes.
"""
