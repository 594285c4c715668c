"""Client configuration.

Configuration is loaded from:
- explicit constructor arguments (highest priority, handled by the client)
- environment variables
- and a local `.env` file (if present)

Nothing is required at load time; the client validates that an API key and a
base URI were provided from one of the sources.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for :class:`globalmoo.client.Client`.

    Environment variables:
    - GMOO_API_KEY
    - GMOO_API_URI
    - GMOO_VALIDATE_TLS      (optional)
    - GMOO_TIMEOUT_SECONDS   (optional)
    - GMOO_LOG_LEVEL         (optional)
    """

    api_key: str = Field(
        default="",
        validation_alias="GMOO_API_KEY",
        description="Bearer token used for API authentication",
    )
    base_uri: str = Field(
        default="",
        validation_alias="GMOO_API_URI",
        description="Base URI of the globalMOO API",
    )
    validate_tls: bool = Field(
        default=True,
        validation_alias="GMOO_VALIDATE_TLS",
        description="Verify TLS certificates. Cannot be disabled for the official domain.",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="GMOO_TIMEOUT_SECONDS",
        description="Per-request timeout for connect and read",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="GMOO_LOG_LEVEL",
        description="Root logging level used by configure_logging",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )
