"""Error message classification against known message fixtures."""

import pytest

from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import (
    AccessError,
    ExpectedType,
    MathTypeArray,
    MissingField,
    TransformSequence,
    TupleStructAccess,
    TypeMismatch,
    UnknownType,
    analyze_error_pattern,
    classify_message,
)

MESSAGE_FIXTURES = [
    (
        "invalid type: map, expected a sequence of 12 f32 values",
        TransformSequence(expected_count=12),
    ),
    (
        "invalid type: map, expected `bevy_ecs::name::Name`",
        ExpectedType("bevy_ecs::name::Name"),
    ),
    (
        "Error accessing element with `Field` access (offset 1): "
        "The struct accessed doesn't have a `value` field",
        AccessError("Field", "The struct accessed doesn't have a `value` field"),
    ),
    (
        "Expected struct access to access a tuple_struct, found a struct instead.",
        TypeMismatch(expected="tuple_struct", actual="struct", access="struct"),
    ),
    (
        "Expected variant tuple access to access a struct variant, "
        "found a tuple variant instead.",
        TypeMismatch(expected="struct", actual="tuple", access="tuple", is_variant=True),
    ),
    (
        "The struct accessed doesn't have an `x` field",
        MissingField(field_name="x", type_name="struct"),
    ),
    ("Unknown component type: `my_game::Foo`", UnknownType("my_game::Foo")),
    ("Unknown resource type `my_game::Score`", UnknownType("my_game::Score")),
    ("invalid access at path `.LinearRgba.red`", TupleStructAccess(".LinearRgba.red")),
    ("Vec3 expects array format", MathTypeArray("Vec3")),
    ("Quat requires array notation", MathTypeArray("Quat")),
]


@pytest.mark.unit
@pytest.mark.parametrize(("message", "expected"), MESSAGE_FIXTURES)
def test_known_messages_classify_to_expected_pattern(message, expected):
    assert classify_message(message) == expected


@pytest.mark.unit
def test_unrecognized_message_yields_none():
    assert classify_message("boom") is None
    assert classify_message("") is None


@pytest.mark.unit
def test_transform_sequence_wins_over_later_templates():
    # Also mentions a path, which would otherwise classify as tuple-struct access.
    message = "at path `.translation`: expected a sequence of 3 f32 values"
    assert classify_message(message) == TransformSequence(expected_count=3)


@pytest.mark.unit
def test_expected_type_wins_over_access_error():
    message = "Error accessing element with `Field` access: expected `alloc::string::String`"
    assert classify_message(message) == ExpectedType("alloc::string::String")


@pytest.mark.unit
def test_classification_ignores_error_code():
    message = "The struct accessed doesn't have a `y` field"
    a = analyze_error_pattern(BrpError(code=-23402, message=message))
    b = analyze_error_pattern(BrpError(code=-32603, message=message))
    assert a == b == MissingField(field_name="y", type_name="struct")
