"""Tests for imagerelay.api.models — Pydantic request/response models.

Tests cover:
- Description validation and trimming on GenerationRequest.
- Alias serialisation of ImageResponse.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from imagerelay.api.models import ErrorResponse, GenerationRequest, ImageResponse


class TestGenerationRequest:
    """Test GenerationRequest Pydantic model."""

    def test_valid_description(self):
        req = GenerationRequest(description="A goblin workshop.")
        assert req.description == "A goblin workshop."

    def test_description_is_trimmed(self):
        req = GenerationRequest.model_validate({"description": "  a cat \n"})
        assert req.description == "a cat"

    def test_missing_description_raises(self):
        with pytest.raises(ValidationError):
            GenerationRequest.model_validate({})

    @pytest.mark.parametrize("value", ["", "   ", "\n\t"])
    def test_blank_description_raises(self, value):
        with pytest.raises(ValidationError):
            GenerationRequest.model_validate({"description": value})

    @pytest.mark.parametrize("value", [None, 123, 1.5, True, ["a"], {"text": "a"}])
    def test_non_string_description_raises(self, value):
        """Non-string values are rejected, not coerced."""
        with pytest.raises(ValidationError):
            GenerationRequest.model_validate({"description": value})

    def test_non_object_payload_raises(self):
        with pytest.raises(ValidationError):
            GenerationRequest.model_validate(["a cat"])

    def test_extra_fields_ignored(self):
        req = GenerationRequest.model_validate({"description": "a cat", "seed": 1})
        assert req.description == "a cat"


class TestResponses:
    """Test response models."""

    def test_image_response_serialises_camel_case(self):
        resp = ImageResponse(image_url="http://x/img.png")
        assert resp.model_dump(by_alias=True) == {"imageUrl": "http://x/img.png"}

    def test_image_response_accepts_alias(self):
        resp = ImageResponse.model_validate({"imageUrl": "http://x/img.png"})
        assert resp.image_url == "http://x/img.png"

    def test_error_response(self):
        assert ErrorResponse(error="boom").model_dump() == {"error": "boom"}
