"""Configuration management for Image Relay.

This module provides centralized configuration management using Pydantic
Settings.  Configuration is loaded from plain environment variables (no
prefix) so that hosting platforms which inject ``PORT`` work unchanged.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (case-insensitive)
2. .env file in the working directory
3. Default values defined in RelayConfig

Example .env file:
    REPLICATE_API_TOKEN=r8_xxxxxxxxxxxxxxxxxxxx
    PORT=3000
    PUBLIC_DIR=public

Construction
------------
Unlike a module-level singleton, the configuration is built once by the
application factory (or the ``main()`` entry point) and handed to the
components that need it.  Tests construct their own instances directly.

Missing Credential
------------------
``REPLICATE_API_TOKEN`` is optional at startup.  Its absence is logged when
the application starts and every generation request then fails with a 500
until the variable is set and the process restarted.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROVIDER_URL = (
    "https://api.replicate.com/v1/models/black-forest-labs/flux-1.1-pro/predictions"
)


class RelayConfig(BaseSettings):
    """Main configuration for Image Relay.

    Attributes
    ----------
    Server Settings:
        host : str
            Bind address.  ``0.0.0.0`` so the server is reachable inside
            containers.
        port : int
            Listen port (``PORT``).
        cors_origins : str
            Comma-separated list of allowed origins, or ``*``.
        log_level : str
            Root log level used by :func:`imagerelay.api.main.main`.

    Provider Settings:
        replicate_api_token : str | None
            Credential sent to the provider.  ``None`` leaves the generation
            endpoint unconfigured.
        provider_url : str
            Prediction-creation endpoint of the model.
        provider_timeout : float | None
            Client-side timeout in seconds.  ``None`` (default) waits for as
            long as the provider holds the connection open.

    Paths:
        public_dir : Path
            Directory holding the single-page application and its assets.

    Examples
    --------
        >>> cfg = RelayConfig(replicate_api_token="r8_test", port=3000)
        >>> cfg.is_configured
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for container deployments)",
    )
    port: int = Field(
        default=10000,
        description="Server port",
        ge=1,
        le=65535,
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated allowed CORS origins, or '*'",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level",
    )

    # Provider settings
    replicate_api_token: str | None = Field(
        default=None,
        description="Replicate API token; generation fails with 500 when unset",
    )
    provider_url: str = Field(
        default=DEFAULT_PROVIDER_URL,
        description="Replicate prediction-creation endpoint for the model",
    )
    provider_timeout: float | None = Field(
        default=None,
        description="Client-side timeout in seconds (unset = wait indefinitely)",
        gt=0,
    )

    # Paths
    public_dir: Path = Field(
        default=Path("public"),
        description="Directory with the single-page application",
    )

    @property
    def is_configured(self) -> bool:
        """Whether a non-empty provider credential is available."""
        return bool(self.replicate_api_token)

    @property
    def allowed_origins(self) -> list[str]:
        """Parsed ``cors_origins`` list; collapses to ``["*"]`` when present."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        if not origins or "*" in origins:
            return ["*"]
        return origins

    @property
    def index_path(self) -> Path:
        """Entry page served for client-side routes."""
        return self.public_dir / "index.html"
