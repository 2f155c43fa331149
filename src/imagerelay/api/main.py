"""Image Relay — FastAPI Application.

This module defines the application factory, the image generation route,
and the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is a stateless relay:

- **Configuration** is a :class:`~imagerelay.core.config.RelayConfig` built
  once and passed to :func:`create_app`; route handlers read it from
  ``app.state.config``.
- **Image generation** is delegated to
  :func:`~imagerelay.core.generation.generate_image`, which talks to
  Replicate through a shared :class:`~imagerelay.core.provider.ReplicateClient`.
- **Errors** are raised as :class:`~imagerelay.core.errors.RelayError` and
  rendered as ``{"error": message}`` by a single exception handler.
- **The frontend** is served from ``public_dir`` by
  :class:`~imagerelay.api.spa.SPAStaticFiles`, which returns ``index.html``
  for any unknown non-API ``GET``.

Endpoints
---------
========  ==========================  ======================================
Method    Path                        Purpose
========  ==========================  ======================================
POST      ``/api/generate-image``     Generate an image from a description
GET       ``/{path}``                 Static asset, else ``index.html``
========  ==========================  ======================================

Usage
-----
CLI (installed entry point)::

    imagerelay

Direct invocation::

    python -m imagerelay.api.main

With an external uvicorn::

    uvicorn --factory imagerelay.api.main:create_app
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from imagerelay import __version__
from imagerelay.api.models import ErrorResponse, GenerationRequest, ImageResponse
from imagerelay.api.spa import SPAStaticFiles
from imagerelay.core.config import RelayConfig
from imagerelay.core.errors import InvalidDescriptionError, RelayError
from imagerelay.core.generation import generate_image
from imagerelay.core.provider import ReplicateClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

router = APIRouter(prefix="/api", tags=["api"])


# ---------------------------------------------------------------------------
# Application lifecycle — provider client setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the shared :class:`ReplicateClient` unless one was injected
        through :func:`create_app`, and reports whether the credential is
        configured.  A missing credential does not stop the server.

    On shutdown:
        Closes the client's connection pool.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    config: RelayConfig = app.state.config
    if app.state.provider is None:
        app.state.provider = ReplicateClient(config)

    logger.info("Server listening at http://%s:%s", config.host, config.port)
    if config.is_configured:
        logger.info("REPLICATE_API_TOKEN loaded successfully.")
    else:
        logger.warning("REPLICATE_API_TOKEN environment variable is not set!")
    logger.info("Serving static files from: %s", config.public_dir.resolve())

    yield  # Application runs here.

    await app.state.provider.close()
    logger.info("Provider client closed on shutdown.")


# ---------------------------------------------------------------------------
# Request helpers.
# ---------------------------------------------------------------------------


async def _read_json_body(request: Request) -> Any:
    """Return the parsed JSON body, or an empty object if there is none.

    Bodies that are not declared as JSON, or that fail to parse, are treated
    as empty so that they fail description validation with a 400.
    """
    if "application/json" not in request.headers.get("content-type", ""):
        return {}
    try:
        return await request.json()
    except ValueError:
        return {}


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render a :class:`RelayError` as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.post(
    "/generate-image",
    response_model=ImageResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate_image_route(request: Request) -> ImageResponse:
    """Generate an image from a text description.

    This endpoint:

    1. Validates ``description`` (string, non-empty after trimming).
    2. Checks that the provider credential is configured.
    3. Posts the prompt to Replicate and waits for the prediction.
    4. Extracts and validates the image URL from the response.

    Returns:
        ``{"imageUrl": ...}`` on success.

    Raises:
        RelayError: Rendered by :func:`relay_error_handler` as 400, 500 or
            502 with an ``error`` message.
    """
    logger.info("Received request for /api/generate-image")

    payload = await _read_json_body(request)
    try:
        req = GenerationRequest.model_validate(payload)
    except ValidationError as exc:
        logger.error("Bad request: missing or invalid description in request body.")
        raise InvalidDescriptionError() from exc
    logger.info('Description received: "%s..."', req.description[:70])

    image_url = await generate_image(
        req.description,
        request.app.state.config,
        request.app.state.provider,
    )
    return ImageResponse(image_url=image_url)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    config: RelayConfig | None = None,
    provider: ReplicateClient | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration to use.  Loaded from the environment when
            omitted.
        provider: Pre-built provider client.  Tests inject one backed by
            ``httpx.MockTransport``; normally it is created on startup.

    Returns:
        The configured application.
    """
    config = config if config is not None else RelayConfig()

    app = FastAPI(
        title="Image Relay",
        description="Relays text descriptions to an image-generation provider.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        logger.info(
            "%s %s %s %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response

    app.add_exception_handler(RelayError, relay_error_handler)
    app.include_router(router)

    # Mounted last so API routes always win over static files.
    app.mount(
        "/",
        SPAStaticFiles(directory=config.public_dir, index_path=config.index_path),
        name="spa",
    )

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :class:`RelayConfig` (``HOST``,
    ``PORT`` and ``LOG_LEVEL`` environment variables).  Defaults to
    ``0.0.0.0:10000``.

    This function is registered as the ``imagerelay`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    config = RelayConfig()
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
