"""Telemetry stays inert by default and reports through scopes when enabled."""

import pytest

from brp_bridge import telemetry
from brp_bridge.executor import FormatDiscoveryExecutor
from brp_bridge.telemetry import InMemoryReporter, TelemetryContext


@pytest.mark.unit
def test_disabled_context_is_shared_no_op():
    ctx = TelemetryContext(InMemoryReporter())
    assert ctx is telemetry._NO_OP_SINGLETON
    with ctx("scope"):
        ctx.count("anything")


@pytest.mark.unit
def test_enabled_scopes_nest_and_record(monkeypatch):
    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", True)
    reporter = InMemoryReporter()
    ctx = TelemetryContext(reporter)

    with ctx("outer"), ctx("inner"):
        ctx.count("hits", 2)

    assert set(reporter.timings) == {"outer", "outer.inner"}
    assert reporter.total("outer.inner.hits") == 2
    assert "outer.inner.hits" in reporter.get_report()


@pytest.mark.unit
def test_broken_reporter_does_not_break_caller(monkeypatch):
    class Broken:
        def record_timing(self, *args, **kwargs):
            raise RuntimeError("boom")

        def record_metric(self, *args, **kwargs):
            raise RuntimeError("boom")

    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", True)
    ctx = TelemetryContext(Broken())
    with ctx("scope"):
        ctx.metric("value", 1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_executor_reports_stages_and_retry(
    monkeypatch, fake_rpc, format_error, ok, config
):
    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", True)
    reporter = InMemoryReporter()
    rpc = fake_rpc(
        format_error("Error accessing element with `Field` access: failed at .x"),
        ok(None),
    )
    executor = FormatDiscoveryExecutor(rpc, config, reporters=[reporter])

    await executor.execute_with_format_discovery(
        "bevy/spawn", {"components": {"Foo": [1]}}
    )

    stages = [meta["stage"] for _, meta in reporter.timings["discovery.stage"]]
    assert stages == list(executor.stage_names)
    assert reporter.total("discovery.stage.discovery.retry") == 1
