"""Tuple struct transformer.

Tuple structs are addressed positionally (``.0``), so payloads written with
named fields or wrapped in a one-key object need unwrapping, and array
payloads need the element the failing path points at.
"""

from typing import Any

from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import (
    AccessError,
    ErrorPattern,
    MissingField,
    TupleStructAccess,
    classify_message,
)
from brp_bridge.discovery.paths import fix_tuple_struct_path

from .base import FormatTransformer, Transformation
from .common import backticked_path, quoted_name, single_field, type_name_from_error

_TUPLE_STRUCT_MARKERS = ("tuple struct", "tuple_struct", "TupleIndex", "AccessError")


def is_tuple_struct_error(message: str) -> bool:
    """True when the message talks about tuple-struct access."""
    return any(marker in message for marker in _TUPLE_STRUCT_MARKERS)


def _index_of(path: str) -> int | None:
    stripped = path.lstrip(".")
    return int(stripped) if stripped.isdigit() else None


class TupleStructTransformer(FormatTransformer):
    """Converts named-field payloads to positional tuple-struct payloads."""

    name = "tuple_struct"

    def can_handle(self, pattern: ErrorPattern) -> bool:  # noqa: D102
        return isinstance(pattern, TupleStructAccess | AccessError | MissingField)

    def transform(self, value: Any) -> Transformation | None:  # noqa: D102
        field = single_field(value)
        if field is not None:
            return field[1], f"Converted field '{field[0]}' to tuple struct access"
        if isinstance(value, list) and value:
            return value[0], "Using first array element for tuple struct access"
        return None

    def transform_with_error(
        self, value: Any, error: BrpError
    ) -> Transformation | None:
        """Use the failing path or field from the message when one is given."""
        type_name = type_name_from_error(error)
        message = error.message

        fixed: Transformation | None = None
        if is_tuple_struct_error(message):
            path = backticked_path(message)
            if path is not None:
                fixed = self.fix_tuple_struct_format(type_name, value, path)
            elif "MissingField" in message and (field := quoted_name(message)):
                fixed = self.handle_missing_field(type_name, value, field)
        if fixed is not None:
            return fixed

        pattern = classify_message(message)
        if isinstance(pattern, MissingField):
            fixed = self.handle_missing_field(type_name, value, pattern.field_name)
        elif isinstance(pattern, TupleStructAccess):
            fixed = self.fix_tuple_struct_format(type_name, value, pattern.field_path)
        elif isinstance(pattern, AccessError):
            fixed = self._fix_by_access(type_name, value, pattern.access)
        return fixed if fixed is not None else self.transform(value)

    @staticmethod
    def fix_tuple_struct_format(
        type_name: str, value: Any, field_path: str
    ) -> Transformation | None:
        """Unwrap a one-key object or pick the array element ``field_path`` names."""
        field = single_field(value)
        if field is not None:
            return (
                field[1],
                f"`{type_name}` is a tuple struct, use numeric indices like .0 "
                "instead of named fields",
            )
        if isinstance(value, list):
            fixed_path = fix_tuple_struct_path(field_path)
            index = _index_of(fixed_path)
            if index is not None and index < len(value):
                if fixed_path == field_path:
                    hint = f"`{type_name}` tuple struct element at index {index} extracted"
                else:
                    hint = (
                        f"`{type_name}` tuple struct: converted '{field_path}' to "
                        f"'{fixed_path}' for element access"
                    )
                return value[index], hint
        return None

    @staticmethod
    def handle_missing_field(
        type_name: str, value: Any, field_name: str
    ) -> Transformation | None:
        """Map a lowercase named field onto its tuple index, else unwrap."""
        if field_name[:1].islower():
            original_path = f".{field_name}"
            fixed_path = fix_tuple_struct_path(original_path)
            if fixed_path != original_path:
                index = _index_of(fixed_path)
                if isinstance(value, list) and index is not None and index < len(value):
                    return (
                        value[index],
                        f"`{type_name}` MissingField '{field_name}': converted to "
                        f"tuple struct index {index}",
                    )
                field = single_field(value)
                if field is not None:
                    return (
                        field[1],
                        f"`{type_name}` MissingField '{field_name}': converted field "
                        f"'{field[0]}' to tuple access",
                    )

        field = single_field(value)
        if field is not None:
            return (
                field[1],
                f"`{type_name}` MissingField '{field_name}': used available field "
                f"'{field[0]}'",
            )
        if isinstance(value, list) and value:
            return (
                value[0],
                f"`{type_name}` MissingField '{field_name}': using first array element",
            )
        return None

    @staticmethod
    def _fix_by_access(type_name: str, value: Any, access: str) -> Transformation | None:
        if access in {"Field", "FieldMut"}:
            field = single_field(value)
            if field is not None:
                return (
                    field[1],
                    f"`{type_name}` AccessError with {access} access: converted field "
                    f"'{field[0]}' to tuple access",
                )
        elif access == "TupleIndex" and isinstance(value, list) and value:
            return (
                value[0],
                f"`{type_name}` AccessError with {access} access: using first array element",
            )
        return None
