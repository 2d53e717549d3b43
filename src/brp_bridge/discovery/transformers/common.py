"""Helpers shared by the default transformers."""

import re
from typing import Any

from brp_bridge.core.types import BrpError

_BACKTICKED_RE = re.compile(r"`([^`]*)`")
_QUOTED_RE = re.compile(r"'([^']*)'")
_PATH_RE = re.compile(r"path\s+`([^`]*)`")

UNKNOWN_TYPE_NAME = "unknown"


def type_name_from_error(error: BrpError) -> str:
    """Return the first backticked text in the message, or ``"unknown"``."""
    match = _BACKTICKED_RE.search(error.message)
    return match.group(1) if match else UNKNOWN_TYPE_NAME


def quoted_name(message: str) -> str | None:
    """Return the first single-quoted token in ``message``."""
    match = _QUOTED_RE.search(message)
    return match.group(1) if match else None


def backticked_path(message: str) -> str | None:
    """Return the path in a ``path `...` `` fragment, if present."""
    match = _PATH_RE.search(message)
    return match.group(1) if match else None


def single_field(value: Any) -> tuple[str, Any] | None:
    """Return ``(key, value)`` when ``value`` is an object with exactly one key."""
    if isinstance(value, dict) and len(value) == 1:
        return next(iter(value.items()))
    return None


def is_number(value: Any) -> bool:
    """True for JSON numbers (bools excluded)."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def short_type_name(type_name: str) -> str:
    """Strip module path and generic arguments: ``a::b::Vec3<f32>`` -> ``Vec3``."""
    return type_name.split("<", 1)[0].rsplit("::", 1)[-1]
