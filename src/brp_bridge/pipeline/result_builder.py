"""Result building stage: return the original outcome or retry once."""

import json
import logging
from typing import Never

from brp_bridge.client import RpcExecutor
from brp_bridge.config import FrozenConfig
from brp_bridge.core.types import (
    DiscoveredCommand,
    EnhancedResult,
    Result,
    Success,
)
from brp_bridge.discovery.locations import apply_corrections, get_parameter_location
from brp_bridge.pipeline.base import BaseAsyncHandler
from brp_bridge.telemetry import TelemetryContext, TelemetryContextProtocol

log = logging.getLogger(__name__)

TIER_RESULTS_HEADER = "Tiered Format Discovery Results:"


class ResultBuilder(BaseAsyncHandler[DiscoveredCommand, EnhancedResult, Never]):
    """Builds the final ``EnhancedResult``.

    With corrections, the corrected parameters are sent exactly once and the
    retry outcome is returned whatever it is. Without corrections, the
    original error comes back unchanged alongside the tier records.
    """

    stage_name = "result_builder"

    def __init__(
        self,
        rpc: RpcExecutor,
        config: FrozenConfig,
        *,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize with the RPC executor used for the single retry."""
        self._rpc = rpc
        self._config = config
        self._telemetry = telemetry if telemetry is not None else TelemetryContext()

    async def handle(self, command: DiscoveredCommand) -> Result[EnhancedResult, Never]:
        """Finish the invocation."""
        ctx = command.context
        data = command.discovery
        if data is None:
            return Success(
                EnhancedResult(result=command.initial_result, debug_info=ctx.debug_trail)
            )

        ctx = ctx.add_debug(
            TIER_RESULTS_HEADER, *(t.to_debug_string() for t in data.all_tier_info)
        )

        if not data.format_corrections:
            log.info("No format corrections found for %s", ctx.method)
            self._telemetry.count("discovery.no_correction", method=ctx.method)
            ctx = ctx.add_debug("No format corrections found; returning original error")
            return Success(
                EnhancedResult(result=command.initial_result, debug_info=ctx.debug_trail)
            )

        location = get_parameter_location(ctx.method)
        corrected_params = apply_corrections(
            ctx.original_params, location, data.corrected_items
        )
        ctx = ctx.add_debug(
            f"Retrying {ctx.method} with {len(data.format_corrections)} format correction(s)"
        )
        if self._config.debug_payloads:
            ctx = ctx.add_debug(
                "Corrected params:\n"
                + json.dumps(corrected_params, indent=2, sort_keys=True, default=str)
            )

        log.info(
            "Retrying %s with corrections for %s",
            ctx.method,
            ", ".join(c.item_name for c in data.format_corrections),
        )
        self._telemetry.count("discovery.retry", method=ctx.method)
        retry = await self._rpc.execute(ctx.method, corrected_params, ctx.port)

        if isinstance(retry, Success):
            ctx = ctx.add_debug("Retry succeeded")
        else:
            error = retry.error
            ctx = ctx.add_debug(f"Retry failed with code {error.code}: {error.message}")

        return Success(
            EnhancedResult(
                result=retry,
                format_corrections=data.format_corrections,
                debug_info=ctx.debug_trail,
            )
        )
