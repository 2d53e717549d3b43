"""Transformer registry ordering and dispatch."""

import pytest

from brp_bridge.core.types import BrpError
from brp_bridge.discovery.detection import (
    ExpectedType,
    MathTypeArray,
    MissingField,
    UnknownType,
)
from brp_bridge.discovery.transformers import (
    FormatTransformer,
    TransformerRegistry,
    TupleStructTransformer,
)


class ShoutTransformer(FormatTransformer):
    name = "shout"

    def can_handle(self, pattern):
        return isinstance(pattern, UnknownType)

    def transform(self, value):
        return str(value).upper(), "shouted"


@pytest.mark.unit
def test_defaults_are_registered_in_order():
    registry = TransformerRegistry.with_defaults()
    assert registry.names == ("math_type", "string_type", "tuple_struct", "enum_variant")
    assert len(registry) == 4


@pytest.mark.unit
def test_first_match_wins_in_registration_order():
    registry = TransformerRegistry.with_defaults()
    # Both tuple_struct and enum_variant accept this; tuple_struct is earlier.
    found = registry.find_transformer(MissingField("Srgba", "enum"))
    assert isinstance(found, TupleStructTransformer)


@pytest.mark.unit
def test_no_transformer_for_unknown_type_by_default():
    registry = TransformerRegistry.with_defaults()
    error = BrpError(code=-23402, message="Unknown component type: `Foo`")
    assert registry.find_transformer(UnknownType("Foo")) is None
    assert registry.transform("x", UnknownType("Foo"), error) is None


@pytest.mark.unit
def test_register_appends_after_existing():
    registry = TransformerRegistry.with_defaults()
    registry.register(ShoutTransformer())
    assert registry.names[-1] == "shout"
    error = BrpError(code=-23402, message="Unknown component type: `Foo`")
    assert registry.transform("abc", UnknownType("Foo"), error) == ("ABC", "shouted")


@pytest.mark.unit
def test_transform_returns_none_when_match_declines():
    registry = TransformerRegistry.with_defaults()
    error = BrpError(code=-23402, message="Vec3 expects array format")
    assert registry.transform("not-a-vector", MathTypeArray("Vec3"), error) is None


@pytest.mark.unit
def test_transform_dispatches_to_matching_transformer():
    registry = TransformerRegistry.with_defaults()
    error = BrpError(code=-23402, message="expected `bevy_ecs::name::Name`")
    value, _ = registry.transform(
        {"name": "Bob"}, ExpectedType("bevy_ecs::name::Name"), error
    )
    assert value == "Bob"
