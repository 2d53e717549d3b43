"""Tiered discovery over extracted items."""

import pytest

from brp_bridge.core.types import (
    AnalyzedCommand,
    BrpError,
    DiscoveryContext,
    Failure,
    Success,
)
from brp_bridge.discovery.probes import ProbeSpec
from brp_bridge.pipeline.tier_execution import TierExecutionHandler, TieredDiscovery


def _err(message: str) -> BrpError:
    return BrpError(code=-23402, message=message)


@pytest.mark.unit
def test_tier_one_success_stops_further_tiers():
    data = TieredDiscovery().run(
        [("Foo", [1, 2, 3])],
        _err("Error accessing element with `Field` access: failed at .x"),
    )
    assert [c.item_name for c in data.format_corrections] == ["Foo"]
    assert data.format_corrections[0].corrected_format == 1
    assert data.corrected_items == (("Foo", 1),)
    assert [(t.tier, t.succeeded) for t in data.all_tier_info] == [(1, True)]


@pytest.mark.unit
def test_no_correction_records_every_tier_and_keeps_value():
    data = TieredDiscovery().run([("Foo", 42)], _err("boom"))
    assert data.format_corrections == ()
    assert data.corrected_items == (("Foo", 42),)
    assert [(t.tier, t.item, t.succeeded) for t in data.all_tier_info] == [
        (1, "Foo", False),
        (2, "Foo", False),
        (3, "Foo", False),
    ]


@pytest.mark.unit
def test_serialization_tier_uses_type_name():
    data = TieredDiscovery().run([("glam::Vec3", [1, 2, 3])], _err("boom"))
    assert data.format_corrections[0].corrected_format == {"x": 1, "y": 2, "z": 3}
    assert [(t.tier, t.succeeded) for t in data.all_tier_info] == [(1, False), (2, True)]
    assert data.all_tier_info[1].tier_name == "Serialization Probing"


@pytest.mark.unit
def test_generic_fallback_tier_follows_message_hint():
    data = TieredDiscovery().run(
        [("my::Label", {"label": "x", "other": 1})],
        _err("invalid type: map, expected string"),
    )
    assert data.format_corrections[0].corrected_format == "x"
    assert [t.succeeded for t in data.all_tier_info] == [False, False, True]
    assert data.all_tier_info[2].message.startswith("object_to_string:")


@pytest.mark.unit
def test_unchanged_transformer_output_does_not_count_as_success():
    # A string cannot be reshaped into a vector, so the math transformer declines.
    data = TieredDiscovery(serialization_probes=[], fallback_probes=[]).run(
        [("my::Pos", "text")], _err("Vec3 expects array format")
    )
    assert data.format_corrections == ()
    assert data.all_tier_info[0].message == "No transformer produced a change for MathTypeArray"


@pytest.mark.unit
def test_math_array_is_not_reshaped_when_remote_wants_an_array():
    data = TieredDiscovery().run(
        [("glam::Vec3", [1, 2, 3])], _err("Vec3 expects array format")
    )
    assert data.format_corrections == ()
    assert data.corrected_items == (("glam::Vec3", [1, 2, 3]),)
    assert [t.succeeded for t in data.all_tier_info] == [False, False, False]


@pytest.mark.unit
def test_scalar_is_not_wrapped_for_a_missing_field():
    data = TieredDiscovery().run(
        [("my::Shape", 3.0)],
        _err("The struct accessed doesn't have a `Circle` field"),
    )
    assert data.format_corrections == ()
    assert data.all_tier_info[-1].message == (
        "No fallback conversion for hint 'needs_object'"
    )


@pytest.mark.unit
def test_partial_corrections_keep_unresolved_items():
    data = TieredDiscovery().run(
        [("A", {"k": 1}), ("B", 42)],
        _err("found a tuple_struct instead"),
    )
    assert [c.item_name for c in data.format_corrections] == ["A"]
    assert data.corrected_items == (("A", 1), ("B", 42))


@pytest.mark.unit
def test_custom_probe_lists_are_used():
    probe = ProbeSpec(
        name="always_zero",
        matcher=lambda v, ctx: True,
        apply=lambda v, ctx: (0, "zeroed"),
    )
    data = TieredDiscovery(serialization_probes=[probe]).run([("X", 5)], _err("boom"))
    assert data.format_corrections[0].corrected_format == 0
    assert data.all_tier_info[-1].message == "always_zero: zeroed"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handler_skips_without_discovery_error():
    ctx = DiscoveryContext(method="bevy/spawn")
    out = await TierExecutionHandler().handle(
        AnalyzedCommand(context=ctx, initial_result=Success(None))
    )
    assert isinstance(out, Success)
    assert out.value.discovery is None
    assert out.value.context.debug_trail == ()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handler_extracts_items_at_method_location():
    error = _err("boom")
    ctx = DiscoveryContext(
        method="bevy/mutate_component",
        original_params={"entity": 1, "component": "glam::Vec2", "path": "", "value": [1, 2]},
    )
    out = await TierExecutionHandler().handle(
        AnalyzedCommand(context=ctx, initial_result=Failure(error), discovery_error=error)
    )
    data = out.value.discovery
    assert data.corrected_items == (("glam::Vec2", {"x": 1, "y": 2}),)
    assert out.value.context.debug_trail == ("Extracted 1 type item(s) for discovery",)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handler_with_no_items_yields_empty_discovery():
    error = _err("boom")
    ctx = DiscoveryContext(method="bevy/spawn", original_params={"components": {}})
    out = await TierExecutionHandler().handle(
        AnalyzedCommand(context=ctx, initial_result=Failure(error), discovery_error=error)
    )
    data = out.value.discovery
    assert data.format_corrections == ()
    assert data.all_tier_info == ()
