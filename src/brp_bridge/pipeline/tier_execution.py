"""Tiered discovery stage.

Each extracted type item goes through up to three tiers, strictly in order,
stopping at the first tier that changes its value:

1. Deterministic Pattern Matching: classify the error text and ask the
   transformer registry for a fix.
2. Serialization Probing: structural probes over the value and the item's
   type name.
3. Generic Fallback: coarse conversions steered by keywords in the error.

Every tier attempted leaves a ``TierInfo`` record. No network I/O happens
here.
"""

from collections.abc import Iterable, Sequence
import logging
from typing import Any, Never

from brp_bridge.constants import (
    TIER_DETERMINISTIC,
    TIER_GENERIC_FALLBACK,
    TIER_SERIALIZATION,
)
from brp_bridge.core.types import (
    AnalyzedCommand,
    BrpError,
    DiscoveredCommand,
    DiscoveryResultData,
    FormatCorrection,
    Result,
    Success,
    TierInfo,
)
from brp_bridge.discovery.detection import analyze_error_pattern
from brp_bridge.discovery.locations import extract_type_items, get_parameter_location
from brp_bridge.discovery.probes import (
    ProbeContext,
    ProbeSpec,
    default_fallback_probes,
    default_serialization_probes,
    fallback_hint,
    run_probes,
)
from brp_bridge.discovery.transformers import Transformation, TransformerRegistry
from brp_bridge.pipeline.base import BaseAsyncHandler

log = logging.getLogger(__name__)

TIER_NAMES = {
    TIER_DETERMINISTIC: "Deterministic Pattern Matching",
    TIER_SERIALIZATION: "Serialization Probing",
    TIER_GENERIC_FALLBACK: "Generic Fallback",
}


def _tier(tier: int, item: str, *, succeeded: bool, message: str) -> TierInfo:
    return TierInfo(
        tier=tier,
        tier_name=TIER_NAMES[tier],
        item=item,
        succeeded=succeeded,
        message=message,
    )


class TieredDiscovery:
    """Runs the three tiers over a list of items."""

    def __init__(
        self,
        registry: TransformerRegistry | None = None,
        serialization_probes: Sequence[ProbeSpec] | None = None,
        fallback_probes: Sequence[ProbeSpec] | None = None,
    ) -> None:
        """Initialize with the registry and probe lists (defaults if omitted)."""
        self.registry = (
            registry if registry is not None else TransformerRegistry.with_defaults()
        )
        self.serialization_probes = tuple(
            serialization_probes
            if serialization_probes is not None
            else default_serialization_probes()
        )
        self.fallback_probes = tuple(
            fallback_probes if fallback_probes is not None else default_fallback_probes()
        )

    def run(
        self, items: Iterable[tuple[str, Any]], error: BrpError
    ) -> DiscoveryResultData:
        """Discover corrections for ``items``; unresolved items keep their value."""
        corrections: list[FormatCorrection] = []
        corrected_items: list[tuple[str, Any]] = []
        tier_info: list[TierInfo] = []

        for name, value in items:
            found, records = self._discover_item(name, value, error)
            tier_info.extend(records)
            if found is None:
                corrected_items.append((name, value))
                continue
            new_value, hint = found
            corrections.append(
                FormatCorrection(
                    item_name=name,
                    original_format=value,
                    corrected_format=new_value,
                    hint=hint,
                )
            )
            corrected_items.append((name, new_value))

        return DiscoveryResultData(
            format_corrections=tuple(corrections),
            corrected_items=tuple(corrected_items),
            all_tier_info=tuple(tier_info),
        )

    def _discover_item(
        self, name: str, value: Any, error: BrpError
    ) -> tuple[Transformation | None, list[TierInfo]]:
        records: list[TierInfo] = []

        # Tier 1
        pattern = analyze_error_pattern(error)
        if pattern is None:
            records.append(
                _tier(
                    TIER_DETERMINISTIC,
                    name,
                    succeeded=False,
                    message="No known error pattern matched",
                )
            )
        else:
            found = self.registry.transform(value, pattern, error)
            if found is not None and found[0] != value:
                records.append(
                    _tier(TIER_DETERMINISTIC, name, succeeded=True, message=found[1])
                )
                return found, records
            records.append(
                _tier(
                    TIER_DETERMINISTIC,
                    name,
                    succeeded=False,
                    message=f"No transformer produced a change for {type(pattern).__name__}",
                )
            )

        # Tier 2
        probe_ctx = ProbeContext(type_name=name, error=error)
        probed = run_probes(self.serialization_probes, value, probe_ctx)
        if probed is not None:
            probe_name, found = probed
            records.append(
                _tier(
                    TIER_SERIALIZATION,
                    name,
                    succeeded=True,
                    message=f"{probe_name}: {found[1]}",
                )
            )
            return found, records
        records.append(
            _tier(
                TIER_SERIALIZATION,
                name,
                succeeded=False,
                message="No serialization probe applied",
            )
        )

        # Tier 3
        hint = fallback_hint(error.message)
        probed = run_probes(
            self.fallback_probes,
            value,
            ProbeContext(type_name=name, error=error, hint=hint),
        )
        if probed is not None:
            probe_name, found = probed
            records.append(
                _tier(
                    TIER_GENERIC_FALLBACK,
                    name,
                    succeeded=True,
                    message=f"{probe_name}: {found[1]}",
                )
            )
            return found, records
        records.append(
            _tier(
                TIER_GENERIC_FALLBACK,
                name,
                succeeded=False,
                message=f"No fallback conversion for hint '{hint.value}'",
            )
        )
        return None, records


class TierExecutionHandler(BaseAsyncHandler[AnalyzedCommand, DiscoveredCommand, Never]):
    """Runs tiered discovery when the analysis stage found a format error."""

    stage_name = "tier_execution"

    def __init__(self, discovery: TieredDiscovery | None = None) -> None:
        """Initialize with a configured ``TieredDiscovery``."""
        self.discovery = discovery if discovery is not None else TieredDiscovery()

    async def handle(self, command: AnalyzedCommand) -> Result[DiscoveredCommand, Never]:
        """Extract items at the method's location and discover corrections."""
        ctx = command.context
        if command.discovery_error is None:
            return Success(
                DiscoveredCommand(context=ctx, initial_result=command.initial_result)
            )

        location = get_parameter_location(ctx.method)
        items = extract_type_items(ctx.original_params, location)
        ctx = ctx.add_debug(f"Extracted {len(items)} type item(s) for discovery")

        data = self.discovery.run(items, command.discovery_error)
        log.debug(
            "Tiered discovery for %s: %d correction(s) over %d item(s)",
            ctx.method,
            len(data.format_corrections),
            len(items),
        )
        return Success(
            DiscoveredCommand(
                context=ctx,
                initial_result=command.initial_result,
                discovery=data,
            )
        )
