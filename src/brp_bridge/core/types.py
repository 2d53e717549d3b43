"""Core data types that flow through the discovery pipeline.

This module defines the immutable records that represent a request as it
moves through the format discovery stages. Each stage returns a new record
rather than mutating the previous one, so a single invocation owns its state
from start to finish and concurrent invocations never share it.
"""

from __future__ import annotations

import dataclasses
import enum
import typing

from ._validation import _freeze_items, _is_tuple_of, _require

# JSON values are passed through untouched; Any keeps the records honest about
# not constraining what the remote application accepts.
type JSONValue = typing.Any

# --- Result Monad for Robust Error Handling ---
# Stage handlers and the RPC executor report outcomes through these types
# instead of raising, so only fatal conditions travel as exceptions.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed result, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Remote protocol records ---


@dataclasses.dataclass(frozen=True, slots=True)
class BrpError:
    """Error member of a JSON-RPC response."""

    code: int
    message: str
    data: JSONValue | None = None

    def __post_init__(self) -> None:
        """Validate field types."""
        _require(
            condition=isinstance(self.code, int) and not isinstance(self.code, bool),
            message="must be an int",
            field_name="code",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.message, str),
            message="must be a str",
            field_name="message",
            exc=TypeError,
        )

    def to_dict(self) -> dict[str, JSONValue]:
        """Render the error in its wire shape."""
        out: dict[str, JSONValue] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


# A remote call either returns its (optional) result payload or an error.
BrpResult = Success[typing.Any] | Failure[BrpError]


# --- Parameter locations ---


class ValueKind(str, enum.Enum):
    """Which sibling field names the type of a single-value payload."""

    COMPONENT = "component"
    RESOURCE = "resource"


@dataclasses.dataclass(frozen=True, slots=True)
class BatchMap:
    """Type items live in a ``components`` map keyed by type name."""


@dataclasses.dataclass(frozen=True, slots=True)
class SingleNamedValue:
    """A single type item: a type-name field plus a ``value`` field."""

    kind: ValueKind


ParameterLocation = BatchMap | SingleNamedValue


# --- Discovery records ---


@dataclasses.dataclass(frozen=True, slots=True)
class FormatCorrection:
    """A repaired payload value for one type item."""

    item_name: str
    original_format: JSONValue
    corrected_format: JSONValue
    hint: str

    def to_dict(self) -> dict[str, JSONValue]:
        """Render the correction for tool output."""
        return {
            "component": self.item_name,
            "original_format": self.original_format,
            "corrected_format": self.corrected_format,
            "hint": self.hint,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class TierInfo:
    """Diagnostic record of a single tier attempt for one item."""

    tier: int
    tier_name: str
    item: str
    succeeded: bool
    message: str

    def to_debug_string(self) -> str:
        """Format as a single debug-trail line."""
        status = "SUCCESS" if self.succeeded else "FAILED"
        return f"  {status} Tier {self.tier}: {self.tier_name} - [{self.item}] {self.message}"


@dataclasses.dataclass(frozen=True, slots=True)
class DiscoveryResultData:
    """Aggregate output of tiered discovery over all extracted items.

    ``corrected_items`` holds every extracted item, corrected or not, so it
    can be handed directly to ``apply_corrections`` for a batch map.
    """

    format_corrections: tuple[FormatCorrection, ...] = ()
    corrected_items: tuple[tuple[str, JSONValue], ...] = ()
    all_tier_info: tuple[TierInfo, ...] = ()

    def __post_init__(self) -> None:
        """Freeze and validate collections."""
        object.__setattr__(
            self, "format_corrections", tuple(self.format_corrections)
        )
        object.__setattr__(
            self, "corrected_items", _freeze_items(self.corrected_items)
        )
        object.__setattr__(self, "all_tier_info", tuple(self.all_tier_info))
        _require(
            condition=_is_tuple_of(self.format_corrections, FormatCorrection),
            message="must be a tuple[FormatCorrection, ...]",
            field_name="format_corrections",
            exc=TypeError,
        )
        _require(
            condition=_is_tuple_of(self.all_tier_info, TierInfo),
            message="must be a tuple[TierInfo, ...]",
            field_name="all_tier_info",
            exc=TypeError,
        )
        names = {name for name, _ in self.corrected_items}
        _require(
            condition=all(c.item_name in names for c in self.format_corrections),
            message="every correction must name an extracted item",
            field_name="format_corrections",
        )


# --- Typed command states ---
# These define the shape of the request as each stage hands it to the next.


@dataclasses.dataclass(frozen=True, slots=True)
class DiscoveryContext:
    """Per-invocation state threaded through every discovery stage."""

    method: str
    original_params: JSONValue | None = None
    port: int | None = None
    debug_trail: tuple[str, ...] = ()
    initial_error: BrpError | None = None

    def __post_init__(self) -> None:
        """Validate DiscoveryContext invariants."""
        _require(
            condition=isinstance(self.method, str) and self.method.strip() != "",
            message="must be a non-empty str",
            field_name="method",
            exc=TypeError,
        )
        _require(
            condition=self.port is None
            or (isinstance(self.port, int) and 0 < self.port < 65536),
            message=f"must be None or a valid TCP port, got {self.port!r}",
            field_name="port",
        )
        object.__setattr__(self, "debug_trail", tuple(self.debug_trail))
        _require(
            condition=_is_tuple_of(self.debug_trail, str),
            message="must be a tuple[str, ...]",
            field_name="debug_trail",
            exc=TypeError,
        )

    def add_debug(self, *messages: str) -> DiscoveryContext:
        """Return a context with ``messages`` appended to the trail."""
        return dataclasses.replace(self, debug_trail=(*self.debug_trail, *messages))

    def with_error(self, error: BrpError) -> DiscoveryContext:
        """Return a context carrying the initial error (set at most once)."""
        _require(
            condition=self.initial_error is None,
            message="initial error is already set",
            field_name="initial_error",
        )
        return dataclasses.replace(self, initial_error=error)


@dataclasses.dataclass(frozen=True, slots=True)
class AttemptedCommand:
    """State after the initial remote call."""

    context: DiscoveryContext
    initial_result: BrpResult


@dataclasses.dataclass(frozen=True, slots=True)
class AnalyzedCommand:
    """State after deciding whether the initial error is recoverable."""

    context: DiscoveryContext
    initial_result: BrpResult
    discovery_error: BrpError | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class DiscoveredCommand:
    """State after tiered discovery; ``discovery`` is None when it was skipped."""

    context: DiscoveryContext
    initial_result: BrpResult
    discovery: DiscoveryResultData | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class EnhancedResult:
    """The engine's only output: final result, corrections and debug trail."""

    result: BrpResult
    format_corrections: tuple[FormatCorrection, ...] = ()
    debug_info: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Freeze collections."""
        object.__setattr__(
            self, "format_corrections", tuple(self.format_corrections)
        )
        object.__setattr__(self, "debug_info", tuple(self.debug_info))
        _require(
            condition=isinstance(self.result, Success | Failure),
            message="must be Success | Failure",
            field_name="result",
            exc=TypeError,
        )

    @property
    def succeeded(self) -> bool:
        """True when the final remote call succeeded."""
        return isinstance(self.result, Success)

    def to_dict(self) -> dict[str, JSONValue]:
        """Render the outcome in the JSON shape a tool response uses."""
        out: dict[str, JSONValue] = {"success": self.succeeded}
        if isinstance(self.result, Success):
            out["data"] = self.result.value
        else:
            out["error"] = self.result.error.to_dict()
        if self.format_corrections:
            out["format_corrections"] = [c.to_dict() for c in self.format_corrections]
        if self.debug_info:
            out["debug_info"] = list(self.debug_info)
        return out
