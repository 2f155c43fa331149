"""Pydantic request and response models for the Image Relay API.

Models
------
GenerationRequest
    Payload for ``POST /api/generate-image`` — a single free-text
    description.
ImageResponse
    Success body: ``{"imageUrl": ...}``.
ErrorResponse
    Failure body: ``{"error": ...}``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class GenerationRequest(BaseModel):
    """Request body for the ``POST /api/generate-image`` endpoint.

    The description must be a JSON string that is non-empty after trimming.
    Numbers, booleans and other types are rejected rather than coerced.

    Attributes:
        description: The image description, stored trimmed.
    """

    description: StrictStr = Field(
        ...,
        description="Text description of the image to generate.",
    )

    @field_validator("description")
    @classmethod
    def _strip_and_require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be blank")
        return value


class ImageResponse(BaseModel):
    """Response body for a successful generation.

    Attributes:
        image_url: URL of the generated image, serialised as ``imageUrl``.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(
        ...,
        alias="imageUrl",
        description="URL of the generated image.",
    )


class ErrorResponse(BaseModel):
    """Response body for every failed request.

    Attributes:
        error: Human-readable error message.
    """

    error: str = Field(
        ...,
        description="Human-readable error message.",
    )
