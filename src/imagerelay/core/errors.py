"""Error types raised by the relay flow.

Each error carries the HTTP status it maps to and the exact message that is
returned to the caller as ``{"error": message}``.  The API layer converts
them in a single exception handler, so core code never imports FastAPI.
"""

from __future__ import annotations

import json


class RelayError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code: int = 500
    message: str = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidDescriptionError(RelayError):
    """The request did not carry a usable description (client error)."""

    status_code = 400
    message = "Missing or invalid image description."


class ServiceNotConfiguredError(RelayError):
    """No provider credential is configured (operator error)."""

    status_code = 500
    message = "Image generation service is not configured correctly."


class UpstreamConnectionError(RelayError):
    """Non-2xx upstream response whose body is not JSON."""

    status_code = 502

    def __init__(self, upstream_status: int) -> None:
        self.upstream_status = upstream_status
        super().__init__(f"Image service connection failed with status: {upstream_status}")


class UpstreamRejectedError(RelayError):
    """Non-2xx upstream response with a JSON error body."""

    status_code = 502

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to generate image. {detail}")


class InvalidPredictionError(RelayError):
    """2xx upstream response that did not yield a usable image URL."""

    status_code = 502

    def __init__(self, observed_status: object) -> None:
        self.observed_status = observed_status
        shown = observed_status if isinstance(observed_status, str) else json.dumps(observed_status)
        super().__init__(
            f"Image service returned status '{shown}' "
            "or did not provide a valid image URL."
        )


class GenerationCallError(RelayError):
    """Transport or parse failure while talking to the provider."""

    status_code = 500
    message = "Internal server error during image generation call."
