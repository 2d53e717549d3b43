"""Immutable configuration used by the client and the discovery pipeline.

Configuration is resolved once and then frozen; nothing downstream reads the
environment again.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FrozenConfig:
    """Resolved, immutable bridge configuration."""

    host: str
    port: int
    timeout_seconds: float
    debug_payloads: bool = False

    @property
    def base_url(self) -> str:
        """Return the URL prefix for the configured host (port excluded)."""
        return f"http://{self.host}"
