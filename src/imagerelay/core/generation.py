"""Image generation flow: credential check, provider call, normalisation.

:func:`generate_image` is the whole relay in one coroutine.  It either
returns an image URL or raises a :class:`~imagerelay.core.errors.RelayError`
whose status and message go straight back to the caller.  Nothing is
retried; the first failure of any kind ends the request.

Status mapping
--------------
=====================================  ======  ===============================
Outcome                                Status  Error
=====================================  ======  ===============================
No credential configured               500     ServiceNotConfiguredError
Call failure / unparsable body         500     GenerationCallError
Non-2xx, body not JSON                 502     UpstreamConnectionError
Non-2xx, JSON body                     502     UpstreamRejectedError
2xx without a usable image URL         502     InvalidPredictionError
2xx with an image URL                  200     (returns the URL)
=====================================  ======  ===============================
"""

from __future__ import annotations

import json
import logging

import httpx

from imagerelay.core.config import RelayConfig
from imagerelay.core.errors import (
    GenerationCallError,
    InvalidPredictionError,
    ServiceNotConfiguredError,
    UpstreamConnectionError,
    UpstreamRejectedError,
)
from imagerelay.core.prediction import decode_prediction, upstream_error_detail
from imagerelay.core.provider import ReplicateClient

logger = logging.getLogger(__name__)


async def generate_image(description: str, config: RelayConfig, client: ReplicateClient) -> str:
    """Generate an image for an already validated description.

    Args:
        description: Trimmed, non-empty image description.
        config: Application configuration holding the credential.
        client: Shared provider client.

    Returns:
        The image URL reported by the provider.

    Raises:
        RelayError: One of its subclasses for every failure (see module
            docstring for the mapping).
    """
    token = config.replicate_api_token
    if not token:
        logger.error("REPLICATE_API_TOKEN is not set in the environment or .env file.")
        raise ServiceNotConfiguredError()
    logger.debug("Using Replicate token starting with: %s...", token[:5])

    try:
        response = await client.create_prediction(description, token)
    except Exception as exc:
        logger.exception("Replicate request failed: %s: %s", type(exc).__name__, exc)
        raise GenerationCallError() from exc

    return normalize_response(response)


def normalize_response(response: httpx.Response) -> str:
    """Turn a provider response into an image URL or a :class:`RelayError`.

    Args:
        response: The provider response with its body already read.

    Returns:
        The validated image URL.

    Raises:
        UpstreamConnectionError: Non-2xx response without a JSON body.
        GenerationCallError: The body could not be parsed as JSON.
        UpstreamRejectedError: Non-2xx response with a JSON body.
        InvalidPredictionError: 2xx response without a usable image URL.
    """
    content_type = response.headers.get("content-type", "")

    # A non-JSON error page (proxy, gateway, HTML) is never parsed.
    if not response.is_success and "application/json" not in content_type:
        logger.error(
            "Replicate API HTTP error: %s %s",
            response.status_code,
            response.reason_phrase,
        )
        logger.info("Raw response body (text): %s", response.text)
        raise UpstreamConnectionError(response.status_code)

    try:
        body = response.json()
    except ValueError as exc:
        logger.error("Could not parse Replicate response as JSON: %s", exc)
        raise GenerationCallError() from exc

    if not response.is_success:
        detail = upstream_error_detail(body, response.status_code)
        logger.error("Replicate API error response (%s): %s", response.status_code, detail)
        logger.warning("Full Replicate error response: %s", json.dumps(body, indent=2))
        raise UpstreamRejectedError(detail)

    prediction = decode_prediction(body)
    logger.info("Received response from Replicate. Status field: '%s'", prediction.raw_status)
    logger.debug("Decoded output: %r", prediction.output)

    image_url = prediction.image_url()
    if image_url is None:
        error = InvalidPredictionError(prediction.raw_status)
        logger.warning("Unexpected prediction: %s", error.message)
        logger.warning("Candidate at failure point: %r", prediction.candidate_url())
        logger.warning("Full Replicate response: %s", json.dumps(body, indent=2))
        raise error

    logger.info("Image URL received: %s", image_url)
    return image_url
