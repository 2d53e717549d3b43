"""Classification of remote error messages into known mismatch patterns.

The remote deserializer reports format problems as free text. This module
matches that text against a fixed, ordered list of templates; the first
template that matches decides the pattern. Classification is best effort: an
unfamiliar message simply yields ``None`` and discovery falls through to the
structural tiers.
"""

from collections.abc import Callable
from dataclasses import dataclass
import re

from brp_bridge.core.types import BrpError

# --- Pattern records ---


@dataclass(frozen=True, slots=True)
class TransformSequence:
    """A Transform was sent in a shape other than a flat f32 sequence."""

    expected_count: int


@dataclass(frozen=True, slots=True)
class ExpectedType:
    """The remote expected a specific type, e.g. ``bevy_ecs::name::Name``."""

    expected_type: str


@dataclass(frozen=True, slots=True)
class AccessError:
    """Reflection path access failed for ``access`` with a nested reason."""

    access: str
    error_type: str


@dataclass(frozen=True, slots=True)
class TypeMismatch:
    """Access kind mismatch; ``is_variant`` marks the enum-variant form."""

    expected: str
    actual: str
    access: str
    is_variant: bool = False


@dataclass(frozen=True, slots=True)
class MissingField:
    """A named field does not exist on the target type."""

    field_name: str
    type_name: str


@dataclass(frozen=True, slots=True)
class UnknownType:
    """The remote registry does not know the component or resource type."""

    type_name: str


@dataclass(frozen=True, slots=True)
class TupleStructAccess:
    """Named-field path used where a tuple struct needs positional access."""

    field_path: str


@dataclass(frozen=True, slots=True)
class MathTypeArray:
    """A math type (Vec2/Vec3/Vec4/Quat) expects array notation."""

    math_type: str


type ErrorPattern = (
    TransformSequence
    | ExpectedType
    | AccessError
    | TypeMismatch
    | MissingField
    | UnknownType
    | TupleStructAccess
    | MathTypeArray
)

# --- Message templates ---

TRANSFORM_SEQUENCE_RE = re.compile(r"expected a sequence of (\d+) f32 values")
EXPECTED_TYPE_RE = re.compile(r"expected `([a-zA-Z_:]+(?::[a-zA-Z_:]+)*)`")
ACCESS_ERROR_RE = re.compile(
    r"Error accessing element with `([^`]+)` access(?:\s*\(offset \d+\))?: (.+)"
)
TYPE_MISMATCH_RE = re.compile(
    r"Expected ([a-zA-Z0-9_\[\]]+) access to access a ([a-zA-Z0-9_]+), "
    r"found a ([a-zA-Z0-9_]+) instead\."
)
VARIANT_TYPE_MISMATCH_RE = re.compile(
    r"Expected variant ([a-zA-Z0-9_\[\]]+) access to access a ([a-zA-Z0-9_]+) "
    r"variant, found a ([a-zA-Z0-9_]+) variant instead\."
)
MISSING_FIELD_RE = re.compile(
    r"The ([a-zA-Z0-9_]+) accessed doesn't have (?:an? )?[`\"]([^`\"]+)[`\"] field"
)
UNKNOWN_TYPE_RE = re.compile(
    r"Unknown (?:component|resource) type:?\s*[`']?([^`'\s]+)[`']?"
)
TUPLE_STRUCT_PATH_RE = re.compile(r"(?:at path|path)\s+[`\"]?([^`\"\s]+)[`\"]?")
MATH_TYPE_ARRAY_RE = re.compile(
    r"(Vec2|Vec3|Vec4|Quat)\s+(?:expects?|requires?|needs?)\s+array"
)


def _transform_sequence(m: re.Match[str]) -> ErrorPattern:
    return TransformSequence(expected_count=int(m.group(1)))


# Ordered most specific first; the first match wins.
_MATCHERS: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], ErrorPattern]], ...] = (
    (TRANSFORM_SEQUENCE_RE, _transform_sequence),
    (EXPECTED_TYPE_RE, lambda m: ExpectedType(m.group(1))),
    (ACCESS_ERROR_RE, lambda m: AccessError(m.group(1), m.group(2))),
    (
        TYPE_MISMATCH_RE,
        lambda m: TypeMismatch(
            expected=m.group(2), actual=m.group(3), access=m.group(1)
        ),
    ),
    (
        VARIANT_TYPE_MISMATCH_RE,
        lambda m: TypeMismatch(
            expected=m.group(2), actual=m.group(3), access=m.group(1), is_variant=True
        ),
    ),
    (MISSING_FIELD_RE, lambda m: MissingField(field_name=m.group(2), type_name=m.group(1))),
    (UNKNOWN_TYPE_RE, lambda m: UnknownType(m.group(1))),
    (TUPLE_STRUCT_PATH_RE, lambda m: TupleStructAccess(m.group(1))),
    (MATH_TYPE_ARRAY_RE, lambda m: MathTypeArray(m.group(1))),
)


def classify_message(message: str) -> ErrorPattern | None:
    """Return the first pattern whose template matches ``message``."""
    for regex, build in _MATCHERS:
        match = regex.search(message)
        if match is not None:
            return build(match)
    return None


def analyze_error_pattern(error: BrpError) -> ErrorPattern | None:
    """Classify ``error.message``; the error code is never consulted."""
    return classify_message(error.message)
