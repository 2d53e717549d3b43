"""Enum variant transformer.

Enums travel externally tagged (``{"Variant": inner}``). Mismatches usually
mean the tag was sent where the bare inner value was expected or the other
way round.
"""

from typing import Any

from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import (
    ErrorPattern,
    MissingField,
    TypeMismatch,
    classify_message,
)
from brp_bridge.discovery.paths import is_enum_variant

from .base import FormatTransformer, Transformation
from .common import single_field, type_name_from_error


def _unwrap(value: Any, type_name: str, context: str) -> Transformation | None:
    field = single_field(value)
    if field is None:
        return None
    return field[1], f"`{type_name}` {context}: converted field '{field[0]}' to variant access"


def _first(value: Any, type_name: str, context: str) -> Transformation | None:
    if isinstance(value, list) and value:
        return value[0], f"`{type_name}` {context}: using first array element"
    return None


class EnumVariantTransformer(FormatTransformer):
    """Moves values into and out of externally tagged variant form."""

    name = "enum_variant"

    def can_handle(self, pattern: ErrorPattern) -> bool:  # noqa: D102
        if isinstance(pattern, TypeMismatch):
            return pattern.is_variant
        if isinstance(pattern, MissingField):
            return is_enum_variant(pattern.field_name)
        return False

    def transform(self, value: Any) -> Transformation | None:  # noqa: D102
        field = single_field(value)
        if field is not None:
            return field[1], f"Converted enum variant field '{field[0]}' to variant access"
        if isinstance(value, list) and value:
            return value[0], "Using first array element for enum variant access"
        return None

    def transform_with_error(
        self, value: Any, error: BrpError
    ) -> Transformation | None:
        """Dispatch on the classified mismatch, else unwrap generically."""
        type_name = type_name_from_error(error)
        fixed: Transformation | None = None
        pattern = classify_message(error.message)
        if isinstance(pattern, TypeMismatch) and pattern.is_variant:
            fixed = self.handle_variant_type_mismatch(
                type_name, value, pattern.expected, pattern.actual, pattern.access
            )
        elif isinstance(pattern, MissingField):
            fixed = self.handle_missing_field(type_name, value, pattern.field_name)
        return fixed if fixed is not None else self.transform(value)

    @staticmethod
    def handle_variant_type_mismatch(
        type_name: str, value: Any, expected: str, actual: str, access: str
    ) -> Transformation | None:
        """Tuple vs struct variant shape mismatch."""
        context = (
            f"VariantTypeMismatch: Expected {expected} variant access to access "
            f"a {actual} variant"
        )
        if (expected, actual) == ("tuple", "struct"):
            return _unwrap(value, type_name, context)
        if (expected, actual) == ("struct", "tuple"):
            return _first(value, type_name, context)
        if access in {"Field", "FieldMut"}:
            return _unwrap(value, type_name, f"VariantTypeMismatch with {access} access")
        if access == "TupleIndex":
            return _first(value, type_name, f"VariantTypeMismatch with {access} access")
        return None

    @staticmethod
    def handle_missing_field(
        type_name: str, value: Any, field_name: str
    ) -> Transformation | None:
        """Extract the named variant, or tag a bare value with it."""
        if is_enum_variant(field_name):
            if isinstance(value, dict):
                if field_name in value:
                    return (
                        value[field_name],
                        f"`{type_name}` MissingField '{field_name}': extracted enum "
                        "variant value",
                    )
            else:
                return (
                    {field_name: value},
                    f"`{type_name}` MissingField '{field_name}': wrapped value in "
                    f"externally tagged variant '{field_name}'",
                )

        field = single_field(value)
        if field is not None:
            return (
                field[1],
                f"`{type_name}` MissingField '{field_name}': used available field "
                f"'{field[0]}'",
            )
        return _first(value, type_name, f"MissingField '{field_name}'")
