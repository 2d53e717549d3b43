"""Telemetry scopes and counters for the discovery engine.

Disabled by default: ``TelemetryContext()`` returns a shared no-op object
unless ``BRP_TELEMETRY=1`` is set and at least one reporter is supplied. When
enabled, scopes are timed and nested per async call chain and every event is
forwarded to the reporters.
"""

from collections import deque
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

log = logging.getLogger(__name__)

# Per-task scope nesting; concurrent invocations never see each other's scopes
_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar(
    "brp_scope_stack",
    default=(),
)

# Evaluated once at import time
_TELEMETRY_ENABLED = os.getenv("BRP_TELEMETRY") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Stateless no-op context."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _EnabledTelemetryContext:
    """Telemetry context that times scopes and forwards events to reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager["_EnabledTelemetryContext"]:
        return self._scope(name, **metadata)

    @contextmanager
    def _scope(self, name: str, **metadata: Any) -> Iterator["_EnabledTelemetryContext"]:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")

        parents = _scope_stack_var.get()
        scope_path = ".".join((*parents, name))
        token = _scope_stack_var.set((*parents, name))
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start
            _scope_stack_var.reset(token)
            enriched = {
                "depth": len(parents),
                "parent_scope": ".".join(parents) if parents else None,
                **metadata,
            }
            self._notify(
                lambda r: r.record_timing(scope_path, duration, **enriched)
            )

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record a metric under the current scope path."""
        parents = _scope_stack_var.get()
        scope_path = ".".join((*parents, name))
        enriched = {
            "depth": len(parents),
            "parent_scope": ".".join(parents) if parents else None,
            **metadata,
        }
        self._notify(lambda r: r.record_metric(scope_path, value, **enriched))

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Record a counter metric."""
        self.metric(name, increment, metric_type="counter", **metadata)

    def _notify(self, emit: Callable[[TelemetryReporter], None]) -> None:
        # A broken reporter must never break a discovery call.
        for reporter in self.reporters:
            try:
                emit(reporter)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


_NO_OP_SINGLETON = _NoOpTelemetryContext()

type TelemetryContextProtocol = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return a telemetry context.

    Returns a full-featured context when telemetry is enabled and reporters
    are given, otherwise the shared no-op instance.
    """
    if _TELEMETRY_ENABLED and reporters:
        return _EnabledTelemetryContext(*reporters)
    return _NO_OP_SINGLETON


class InMemoryReporter:
    """Reporter that keeps bounded per-scope history in memory.

    Useful in development and tests; ``get_report()`` renders a summary.
    """

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = {}

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (duration, metadata)
        )

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (value, metadata)
        )

    def total(self, scope: str) -> float:
        """Sum of numeric values recorded under ``scope``."""
        return sum(
            v for v, _ in self.metrics.get(scope, ()) if isinstance(v, int | float)
        )

    def get_report(self) -> str:
        """Render timings and metrics as a flat, sorted summary."""
        lines = ["=== Telemetry Report ==="]
        if self.timings:
            lines.append("--- Timings ---")
            for scope, values in sorted(self.timings.items()):
                durations = [d for d, _ in values]
                lines.append(
                    f"{scope:<40} | Calls: {len(durations):<4} | "
                    f"Avg: {sum(durations) / len(durations):.4f}s"
                )
        if self.metrics:
            lines.append("--- Metrics ---")
            for scope, values in sorted(self.metrics.items()):
                lines.append(
                    f"{scope:<40} | Count: {len(values):<4} | "
                    f"Total: {self.total(scope):,.0f}"
                )
        return "\n".join(lines)
