"""Structural probes for the serialization and generic-fallback tiers.

A probe is a named ``(matcher, apply)`` pair with a priority, in the same
shape as the result-extraction transforms: probes are tried highest priority
first (name breaks ties) and the first one that yields a different value
wins. Serialization probes look only at the value and the item's type name;
fallback probes are steered by a coarse hint read from the error text.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
import enum
from typing import Any

from brp_bridge.core.types import BrpError

from .paths import is_enum_variant
from .transformers.base import Transformation
from .transformers.common import is_number, short_type_name, single_field
from .transformers.math_type import (
    expects_array_format,
    flat_sequence_to_transform,
    math_fields_for,
    to_array,
    to_keyed,
    transform_members_to_arrays,
)
from .transformers.string_type import extract_string


class FallbackHint(str, enum.Enum):
    """What the error text suggests the remote wanted."""

    NEEDS_STRING = "needs_string"
    NEEDS_ARRAY = "needs_array"
    NEEDS_TUPLE_ACCESS = "needs_tuple_access"
    NEEDS_OBJECT = "needs_object"
    UNKNOWN = "unknown"


# Checked in order; the first group with a matching keyword decides.
_HINT_KEYWORDS: tuple[tuple[FallbackHint, tuple[str, ...]], ...] = (
    (FallbackHint.NEEDS_STRING, ("expected string", "String", "Name")),
    (
        FallbackHint.NEEDS_ARRAY,
        ("expected array", "sequence", "Vec2", "Vec3", "Vec4", "Quat", "Transform"),
    ),
    (
        FallbackHint.NEEDS_TUPLE_ACCESS,
        ("tuple struct", "tuple_struct", "TupleIndex"),
    ),
    (FallbackHint.NEEDS_OBJECT, ("expected object", "struct")),
)


def fallback_hint(message: str) -> FallbackHint:
    """Map error text to a coarse conversion hint."""
    for hint, keywords in _HINT_KEYWORDS:
        if any(k in message for k in keywords):
            return hint
    return FallbackHint.UNKNOWN


@dataclass(frozen=True, slots=True)
class ProbeContext:
    """What a probe may look at besides the value itself."""

    type_name: str
    error: BrpError
    hint: FallbackHint = FallbackHint.UNKNOWN

    @property
    def short_type_name(self) -> str:  # noqa: D102
        return short_type_name(self.type_name)


@dataclass(frozen=True, slots=True)
class ProbeSpec:
    """A named structural conversion."""

    name: str
    matcher: Callable[[Any, ProbeContext], bool]
    apply: Callable[[Any, ProbeContext], Transformation | None]
    priority: int = 0


def run_probes(
    probes: Iterable[ProbeSpec], value: Any, ctx: ProbeContext
) -> tuple[str, Transformation] | None:
    """Return the first probe result that changes ``value``."""
    for probe in sorted(probes, key=lambda p: (-p.priority, p.name)):
        if not probe.matcher(value, ctx):
            continue
        result = probe.apply(value, ctx)
        if result is not None and result[0] != value:
            return probe.name, result
    return None


def _is_scalar(value: Any) -> bool:
    return is_number(value) or isinstance(value, str | bool)


# --- Serialization probes ---


def _transform_members(value: Any, ctx: ProbeContext) -> Transformation | None:
    members = transform_members_to_arrays(value)
    if members is None:
        return None
    corrected, converted = members
    return corrected, (
        f"`{ctx.type_name}` Transform members serialize as arrays: "
        + ", ".join(converted)
    )


def _flat_transform(value: Any, ctx: ProbeContext) -> Transformation | None:
    struct = flat_sequence_to_transform(value)
    if struct is None:
        return None
    return struct, f"`{ctx.type_name}` Transform serializes as a struct of arrays"


def _math_object_fields(value: Any, ctx: ProbeContext) -> tuple[str, ...] | None:
    named = math_fields_for(ctx.type_name)
    if named is not None:
        return named
    if isinstance(value, dict):
        for fields in (("x", "y"), ("x", "y", "z"), ("x", "y", "z", "w")):
            if set(value) == set(fields):
                return fields
    return None


def _math_object_to_array(value: Any, ctx: ProbeContext) -> Transformation | None:
    fields = _math_object_fields(value, ctx)
    array = to_array(value, fields) if fields is not None else None
    if array is None:
        return None
    return array, f"`{ctx.type_name}` serializes as a {len(array)}-element array"


def _math_array_to_object(value: Any, ctx: ProbeContext) -> Transformation | None:
    if expects_array_format(ctx.error.message):
        return None
    fields = math_fields_for(ctx.type_name)
    keyed = to_keyed(value, fields) if fields is not None else None
    if keyed is None:
        return None
    return keyed, f"`{ctx.type_name}` serializes with named fields {list(fields)}"


def _tagged_variant_unwrap(value: Any, ctx: ProbeContext) -> Transformation | None:
    field = single_field(value)
    if field is None or not is_enum_variant(field[0]):
        return None
    return field[1], f"`{ctx.type_name}` unwrapped tagged variant '{field[0]}'"


def default_serialization_probes() -> list[ProbeSpec]:
    """Structural probes for tier 2, most specific first."""
    return [
        ProbeSpec(
            name="transform_members_to_arrays",
            matcher=lambda v, _ctx: isinstance(v, dict),
            apply=_transform_members,
            priority=50,
        ),
        ProbeSpec(
            name="flat_transform_to_struct",
            matcher=lambda v, ctx: isinstance(v, list)
            and ctx.short_type_name == "Transform",
            apply=_flat_transform,
            priority=45,
        ),
        ProbeSpec(
            name="math_object_to_array",
            matcher=lambda v, _ctx: isinstance(v, dict),
            apply=_math_object_to_array,
            priority=40,
        ),
        ProbeSpec(
            name="math_array_to_object",
            matcher=lambda v, ctx: isinstance(v, list)
            and math_fields_for(ctx.type_name) is not None,
            apply=_math_array_to_object,
            priority=30,
        ),
        ProbeSpec(
            name="tagged_variant_unwrap",
            matcher=lambda v, _ctx: isinstance(v, dict) and len(v) == 1,
            apply=_tagged_variant_unwrap,
            priority=10,
        ),
    ]


# --- Generic fallback probes ---


def _to_string(value: Any, ctx: ProbeContext) -> Transformation | None:
    found = extract_string(value)
    if found is None:
        return None
    text, source = found
    return text, f"`{ctx.type_name}` converted to string {source}"


def _object_to_array(value: Any, ctx: ProbeContext) -> Transformation | None:
    return list(value.values()), f"`{ctx.type_name}` converted object values to array"


def _array_to_object(value: Any, ctx: ProbeContext) -> Transformation | None:
    return {"items": value}, f"`{ctx.type_name}` wrapped array in object"


def _unwrap_single_field(value: Any, ctx: ProbeContext) -> Transformation | None:
    key, inner = next(iter(value.items()))
    return inner, f"`{ctx.type_name}` unwrapped single field '{key}'"


def _single_element(value: Any, ctx: ProbeContext) -> Transformation | None:
    return value[0], f"`{ctx.type_name}` unwrapped single-element array"


def _wrap_scalar(value: Any, ctx: ProbeContext) -> Transformation | None:
    return [value], f"`{ctx.type_name}` wrapped scalar in array"


_ANY_TUPLE = {FallbackHint.NEEDS_TUPLE_ACCESS, FallbackHint.UNKNOWN}


def default_fallback_probes() -> list[ProbeSpec]:
    """Hint-guided conversions for tier 3."""
    return [
        ProbeSpec(
            name="object_to_string",
            matcher=lambda v, ctx: ctx.hint is FallbackHint.NEEDS_STRING
            and isinstance(v, dict),
            apply=_to_string,
            priority=60,
        ),
        ProbeSpec(
            name="array_to_string",
            matcher=lambda v, ctx: ctx.hint is FallbackHint.NEEDS_STRING
            and isinstance(v, list),
            apply=_to_string,
            priority=55,
        ),
        ProbeSpec(
            name="object_to_array",
            matcher=lambda v, ctx: ctx.hint is FallbackHint.NEEDS_ARRAY
            and isinstance(v, dict)
            and bool(v),
            apply=_object_to_array,
            priority=50,
        ),
        ProbeSpec(
            name="array_to_object",
            matcher=lambda v, ctx: ctx.hint is FallbackHint.NEEDS_OBJECT
            and isinstance(v, list),
            apply=_array_to_object,
            priority=45,
        ),
        ProbeSpec(
            name="unwrap_single_field",
            matcher=lambda v, ctx: ctx.hint in _ANY_TUPLE
            and isinstance(v, dict)
            and len(v) == 1,
            apply=_unwrap_single_field,
            priority=40,
        ),
        ProbeSpec(
            name="single_element_array",
            matcher=lambda v, ctx: ctx.hint in _ANY_TUPLE
            and isinstance(v, list)
            and len(v) == 1,
            apply=_single_element,
            priority=35,
        ),
        ProbeSpec(
            name="wrap_scalar",
            matcher=lambda v, ctx: ctx.hint is FallbackHint.NEEDS_ARRAY
            and _is_scalar(v),
            apply=_wrap_scalar,
            priority=10,
        ),
    ]
