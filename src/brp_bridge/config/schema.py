"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces
configuration values from the environment and programmatic overrides into the
correct types with proper defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from brp_bridge.constants import DEFAULT_BRP_HOST, DEFAULT_BRP_PORT, NETWORK_TIMEOUT


class BrpSettings(BaseSettings):
    """Pydantic settings schema for the bridge.

    Integrates with environment variables using the ``BRP_`` prefix, e.g.
    ``BRP_PORT=15703`` or ``BRP_DEBUG_PAYLOADS=1``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BRP_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    host: str = Field(
        default=DEFAULT_BRP_HOST,
        description="Host running the remote application",
        min_length=1,
    )

    port: int = Field(
        default=DEFAULT_BRP_PORT,
        description="Default port when a call does not name one",
        ge=1,
        le=65535,
    )

    timeout_seconds: float = Field(
        default=NETWORK_TIMEOUT,
        description="Upper bound for a single request round trip",
        gt=0,
    )

    debug_payloads: bool = Field(
        default=False,
        description="Include pretty-printed params and responses in the debug trail",
    )

    @field_validator("host")
    @classmethod
    def strip_host(cls, v: str) -> str:
        """Reject whitespace-only hosts."""
        host = v.strip()
        if not host:
            raise ValueError("host must not be blank")
        return host

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary of resolved values."""
        return {
            "host": self.host,
            "port": self.port,
            "timeout_seconds": self.timeout_seconds,
            "debug_payloads": self.debug_payloads,
        }
