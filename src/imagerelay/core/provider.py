"""HTTP client for the Replicate prediction endpoint.

This module provides a :class:`ReplicateClient` that issues the single
outbound call the relay makes per request.  The client is deliberately thin:
it builds the request, sends it, and hands the raw :class:`httpx.Response`
back to :mod:`imagerelay.core.generation`, which owns every decision about
what the response means.

Waiting for completion
----------------------
Requests carry ``Prefer: wait`` so Replicate holds the connection open until
the prediction finishes instead of returning a pending job.  For that reason
the client sets no timeout unless ``provider_timeout`` is configured.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from imagerelay.core.config import RelayConfig

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"


def build_request_body(prompt: str) -> dict[str, Any]:
    """Build the prediction input payload for *prompt*.

    Prompt upsampling is always enabled.
    """
    return {
        "input": {
            "prompt": prompt,
            "prompt_upsampling": True,
        }
    }


def build_headers(token: str) -> dict[str, str]:
    """Build the request headers carrying *token* as the credential."""
    return {
        "Authorization": f"Token {token}",
        "Content-Type": "application/json",
        "Prefer": "wait",
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }


class ReplicateClient:
    """Async client for creating Replicate predictions.

    One instance is shared by all requests for the lifetime of the
    application.  It holds no per-request state.

    Args:
        config: Application configuration (endpoint and timeout).
        transport: Optional httpx transport, used by tests to simulate the
            provider without network access.
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = config.provider_url
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.provider_timeout),
            transport=transport,
        )

    async def create_prediction(self, prompt: str, token: str) -> httpx.Response:
        """POST a prediction request and return the raw response.

        Non-2xx responses are returned, not raised.

        Args:
            prompt: The trimmed image description.
            token: The Replicate API token.

        Returns:
            The provider's response with its body already read.

        Raises:
            httpx.RequestError: If the request could not be completed
                (connection failure, timeout, protocol error).
        """
        logger.info("Sending request to Replicate model: %s", self.url)
        response = await self._client.post(
            self.url,
            headers=build_headers(token),
            json=build_request_body(prompt),
        )
        logger.info("Replicate responded with HTTP %s", response.status_code)
        return response

    async def close(self) -> None:
        """Close the underlying HTTP client and release its connections."""
        await self._client.aclose()
