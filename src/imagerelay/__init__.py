"""Image Relay - text-to-image relay in front of the Replicate predictions API."""

__version__ = "1.0.0"

from imagerelay.core.config import RelayConfig

__all__ = [
    "RelayConfig",
    "__version__",
]
