"""Core functionality for relaying image generation requests.

This package holds everything that is independent of the HTTP framework:

- **RelayConfig**: Configuration management using Pydantic Settings
- **ReplicateClient**: The single outbound call to the prediction endpoint
- **decode_prediction**: Tagged decode of the variable-shape provider response
- **generate_image**: The full validate → call → normalise flow
- **RelayError**: Exception hierarchy carrying the HTTP status of each failure

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - Built once at startup and handed to the application factory

2. **Provider Layer** (provider.py, prediction.py):
   - httpx-based client that posts the prediction request
   - Response decoding into explicit status and output variants

3. **Flow Layer** (generation.py, errors.py):
   - Maps every upstream outcome onto a :class:`RelayError` or an image URL
"""

from imagerelay.core.config import RelayConfig
from imagerelay.core.errors import RelayError
from imagerelay.core.generation import generate_image
from imagerelay.core.prediction import decode_prediction
from imagerelay.core.provider import ReplicateClient

__all__ = [
    "RelayConfig",
    "RelayError",
    "ReplicateClient",
    "decode_prediction",
    "generate_image",
]
