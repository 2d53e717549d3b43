"""Configuration management for the BRP bridge.

Resolve-once, freeze-then-flow: ``resolve_config()`` merges programmatic
overrides over ``BRP_*`` environment variables over defaults and returns an
immutable ``FrozenConfig`` that is passed explicitly to the client and the
discovery executor.
"""

from .api import resolve_config
from .schema import BrpSettings
from .types import FrozenConfig

__all__ = ["BrpSettings", "FrozenConfig", "resolve_config"]
