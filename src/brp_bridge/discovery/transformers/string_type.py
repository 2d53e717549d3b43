"""String transformer for ``Name`` components and plain ``String`` values."""

from typing import Any

from brp_bridge.constants import STRING_WRAPPER_FIELDS
from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import ErrorPattern, ExpectedType

from .base import FormatTransformer, Transformation
from .common import type_name_from_error

_NAME_MARKERS = ("::Name", "::name::Name")
_JSON_KINDS = {dict: "object", list: "array"}


def expects_string(expected_type: str) -> bool:
    """True when the expected type is ``String`` or a ``Name`` type."""
    return "String" in expected_type or any(m in expected_type for m in _NAME_MARKERS)


def extract_string(value: Any) -> tuple[str, str] | None:
    """Find the string a wrapper value is carrying.

    Returns the string and a short description of where it came from.
    """
    if isinstance(value, str):
        return value, "already string format"
    if isinstance(value, dict):
        for field in STRING_WRAPPER_FIELDS:
            if isinstance(value.get(field), str):
                return value[field], f"from `{field}` field"
        if len(value) == 1:
            field, inner = next(iter(value.items()))
            if isinstance(inner, str):
                return inner, f"from `{field}` field"
    if isinstance(value, list) and len(value) == 1 and isinstance(value[0], str):
        return value[0], "from single-element array"
    return None


class StringTypeTransformer(FormatTransformer):
    """Unwraps strings sent inside objects or one-element arrays."""

    name = "string_type"

    def can_handle(self, pattern: ErrorPattern) -> bool:  # noqa: D102
        return isinstance(pattern, ExpectedType) and expects_string(
            pattern.expected_type
        )

    def transform(self, value: Any) -> Transformation | None:  # noqa: D102
        found = extract_string(value)
        if found is None:
            return None
        text, source = found
        return text, f"String extracted {source}"

    def transform_with_error(
        self, value: Any, error: BrpError
    ) -> Transformation | None:
        """Extract the string and name the expected type in the hint."""
        found = extract_string(value)
        if found is None:
            return None
        text, source = found
        type_name = type_name_from_error(error)
        if any(m in type_name for m in _NAME_MARKERS):
            kind = _JSON_KINDS.get(type(value), "other")
            return (
                text,
                f"`{type_name}` Name component expects string format, "
                f"extracted {source} (was {kind})",
            )
        return text, f"`{type_name}` expects string format, extracted {source}"
