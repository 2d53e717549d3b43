"""Public API for configuration resolution."""

import logging
from typing import Any

from pydantic import ValidationError

from brp_bridge.core.exceptions import ConfigurationError

from .schema import BrpSettings
from .types import FrozenConfig

logger = logging.getLogger(__name__)


def resolve_config(overrides: dict[str, Any] | None = None) -> FrozenConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: Programmatic > Environment (``BRP_*``) > Defaults. Unknown
    override keys are ignored.

    Args:
        overrides: Optional programmatic values (highest precedence).

    Returns:
        FrozenConfig with validated values.

    Raises:
        ConfigurationError: If any value fails validation.

    Example:
        config = resolve_config({"port": 15703, "debug_payloads": True})
    """
    known = set(BrpSettings.model_fields)
    programmatic = {k: v for k, v in (overrides or {}).items() if k in known}
    ignored = set(overrides or {}) - known
    if ignored:
        logger.debug("Ignoring unknown configuration keys: %s", sorted(ignored))

    try:
        settings = BrpSettings(**programmatic)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid bridge configuration: {e}") from e

    return FrozenConfig(**settings.to_dict())
