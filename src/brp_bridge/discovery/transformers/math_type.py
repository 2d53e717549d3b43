"""Math type transformer: Vec2/Vec3/Vec4/Quat and Transform layouts.

The remote side serializes glam vectors and quaternions as flat arrays
(``[x, y, z]``), while callers often send keyed objects (``{"x": 1, ...}``).
Transforms are structs whose members are such arrays.
"""

import logging
import re
from typing import Any

from brp_bridge.constants import TRANSFORM_FIELDS, TRANSFORM_SEQUENCE_F32_COUNT
from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import (
    ErrorPattern,
    MathTypeArray,
    TransformSequence,
    classify_message,
)

from .base import FormatTransformer, Transformation
from .common import is_number, short_type_name, type_name_from_error

log = logging.getLogger(__name__)

# Checked in this order against the error text
MATH_TYPE_FIELDS: dict[str, tuple[str, ...]] = {
    "Vec2": ("x", "y"),
    "Vec3": ("x", "y", "z"),
    "Vec4": ("x", "y", "z", "w"),
    "Quat": ("x", "y", "z", "w"),
}

# translation (Vec3) + rotation (Quat) + scale (Vec3)
_TRANSFORM_LAYOUT = (("translation", 3), ("rotation", 4), ("scale", 3))
TRANSFORM_FLAT_LENGTH = sum(n for _, n in _TRANSFORM_LAYOUT)

_ARRAY_EXPECTED_RE = re.compile(r"expect(?:s|ed)\s+(?:an?\s+)?(?:array|sequence)\b")
_OBJECT_EXPECTED_RE = re.compile(r"expect(?:s|ed)\s+(?:an?\s+)?(?:object|struct|map)\b")


def expects_array_format(message: str) -> bool:
    """True when the error asks for the flat array form."""
    return _ARRAY_EXPECTED_RE.search(message) is not None


def expects_object_format(message: str) -> bool:
    """True when the error asks for the keyed object form."""
    return _OBJECT_EXPECTED_RE.search(message) is not None


def math_fields_for(type_name: str) -> tuple[str, ...] | None:
    """Return component names for a math type name, including I/U/D variants.

    Example:
        math_fields_for("glam::DVec3")  # ("x", "y", "z")
    """
    short = short_type_name(type_name)
    if short[:1] in {"I", "U", "D"} and short[1:] in MATH_TYPE_FIELDS:
        short = short[1:]
    return MATH_TYPE_FIELDS.get(short)


def to_array(value: Any, fields: tuple[str, ...]) -> list[Any] | None:
    """Keyed object -> ordered numeric array; ``None`` if the shape differs."""
    if not isinstance(value, dict) or set(value) != set(fields):
        return None
    if not all(is_number(value[f]) for f in fields):
        return None
    return [value[f] for f in fields]


def to_keyed(value: Any, fields: tuple[str, ...]) -> dict[str, Any] | None:
    """Numeric array of matching length -> keyed object."""
    if not isinstance(value, list) or len(value) != len(fields):
        return None
    if not all(is_number(v) for v in value):
        return None
    return dict(zip(fields, value, strict=True))


def transform_members_to_arrays(value: Any) -> tuple[dict[str, Any], list[str]] | None:
    """Convert keyed ``translation``/``rotation``/``scale`` members to arrays.

    Returns the new object and the names of converted members, or ``None``
    when nothing needed converting.
    """
    if not isinstance(value, dict) or not set(value) & set(TRANSFORM_FIELDS):
        return None
    corrected = dict(value)
    converted: list[str] = []
    for member, size in _TRANSFORM_LAYOUT:
        if member not in value:
            continue
        fields = MATH_TYPE_FIELDS["Quat" if size == 4 else "Vec3"]
        array = to_array(value[member], fields)
        if array is not None:
            corrected[member] = array
            converted.append(member)
    return (corrected, converted) if converted else None


def flat_sequence_to_transform(value: Any) -> dict[str, list[Any]] | None:
    """Split a flat 10-number sequence into the Transform struct form."""
    if not isinstance(value, list) or len(value) != TRANSFORM_FLAT_LENGTH:
        return None
    if not all(is_number(v) for v in value):
        return None
    out: dict[str, list[Any]] = {}
    start = 0
    for member, size in _TRANSFORM_LAYOUT:
        out[member] = value[start : start + size]
        start += size
    return out


class MathTypeTransformer(FormatTransformer):
    """Repairs vector, quaternion and Transform layouts."""

    name = "math_type"

    def can_handle(self, pattern: ErrorPattern) -> bool:  # noqa: D102
        return isinstance(pattern, MathTypeArray | TransformSequence)

    def transform(self, value: Any) -> Transformation | None:  # noqa: D102
        for math_type in ("Vec2", "Vec3", "Vec4"):
            array = to_array(value, MATH_TYPE_FIELDS[math_type])
            if array is not None:
                return array, f"Converted to {math_type} array format"
        return None

    def transform_with_error(
        self, value: Any, error: BrpError
    ) -> Transformation | None:
        """Pick the math type named in the message, else treat it as a Transform."""
        type_name = type_name_from_error(error)
        message = error.message

        for math_type, fields in MATH_TYPE_FIELDS.items():
            if math_type in message:
                fixed = self._fix_math_type(
                    type_name, value, math_type, fields, message
                )
                if fixed is not None:
                    return fixed
                break

        pattern = classify_message(message)
        if "Transform" in message or isinstance(pattern, TransformSequence):
            expected = (
                pattern.expected_count
                if isinstance(pattern, TransformSequence)
                else TRANSFORM_SEQUENCE_F32_COUNT
            )
            return self._fix_transform(type_name, value, expected)

        return self.transform(value)

    @staticmethod
    def _fix_math_type(
        type_name: str,
        value: Any,
        math_type: str,
        fields: tuple[str, ...],
        message: str,
    ) -> Transformation | None:
        layout = ", ".join(fields)
        array = to_array(value, fields)
        if array is not None:
            return array, f"`{type_name}` {math_type} expects array format [{layout}]"
        # An array is only rewritten when the remote asked for the keyed form
        if not expects_object_format(message):
            return None
        keyed = to_keyed(value, fields)
        if keyed is not None:
            return keyed, f"`{type_name}` {math_type} expects object format {{{layout}}}"
        return None

    @staticmethod
    def _fix_transform(
        type_name: str, value: Any, expected_count: int
    ) -> Transformation | None:
        members = transform_members_to_arrays(value)
        if members is not None:
            corrected, converted = members
            parts = ", ".join(
                f"`{m}` converted to {'Quat' if m == 'rotation' else 'Vec3'} array format"
                for m in converted
            )
            return (
                corrected,
                f"`{type_name}` Transform expected {expected_count} f32 values "
                f"in sequence - {parts}",
            )

        struct = flat_sequence_to_transform(value)
        if struct is not None:
            return (
                struct,
                f"`{type_name}` Transform expected {expected_count} f32 values "
                "in sequence - flat sequence split into translation, rotation and scale",
            )

        log.debug("No Transform layout fix for `%s`", type_name)
        return None
