"""The primary entry point for format discovery.

``FormatDiscoveryExecutor`` runs a request through a fixed pipeline of
handlers, each wrapped in a telemetry scope:

    initial attempt -> error analysis -> tier execution -> result building

Handlers report outcomes as ``Success``/``Failure``. A ``Failure`` becomes a
``PipelineError`` naming the stage, and a handler that returns something
other than a result breaks the executor's contract and raises
``InvariantViolationError``. Transport and protocol exceptions from the RPC
executor are never caught here.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import TYPE_CHECKING, Any

from brp_bridge.client import BrpClient, RpcExecutor
from brp_bridge.config import FrozenConfig, resolve_config
from brp_bridge.core.exceptions import InvariantViolationError, PipelineError
from brp_bridge.core.types import (
    DiscoveryContext,
    EnhancedResult,
    Failure,
    Success,
)
from brp_bridge.discovery.transformers import TransformerRegistry
from brp_bridge.pipeline.error_analysis import ErrorAnalysisHandler
from brp_bridge.pipeline.initial_attempt import InitialAttemptHandler
from brp_bridge.pipeline.result_builder import ResultBuilder
from brp_bridge.pipeline.tier_execution import TierExecutionHandler, TieredDiscovery
from brp_bridge.telemetry import TelemetryContext, TelemetryReporter

if TYPE_CHECKING:
    from brp_bridge.pipeline.base import BaseAsyncHandler

log = logging.getLogger(__name__)


def _stage_name(handler: Any) -> str:
    return getattr(handler, "stage_name", type(handler).__name__)


class FormatDiscoveryExecutor:
    """Executes BRP calls with automatic format discovery and one retry."""

    def __init__(
        self,
        rpc: RpcExecutor,
        config: FrozenConfig | None = None,
        pipeline_handlers: Iterable[BaseAsyncHandler[Any, Any, Any]] | None = None,
        *,
        registry: TransformerRegistry | None = None,
        reporters: Iterable[TelemetryReporter] = (),
    ):
        """Initialize the executor.

        Args:
            rpc: Performs the remote calls (``BrpClient`` or a test fake).
            config: Resolved configuration; resolved from the environment when
                omitted.
            pipeline_handlers: Optional handlers replacing the default pipeline.
            registry: Transformer registry for deterministic discovery.
            reporters: Telemetry reporters; only used when telemetry is enabled.
        """
        self.rpc = rpc
        self.config = config if config is not None else resolve_config()
        self._telemetry = TelemetryContext(*reporters)
        handlers = list(
            pipeline_handlers
            if pipeline_handlers is not None
            else self._build_default_pipeline(registry)
        )
        if not handlers:
            raise ValueError("Pipeline may not be empty; provide at least one handler.")
        self._pipeline = handlers

    def _build_default_pipeline(
        self, registry: TransformerRegistry | None
    ) -> list[Any]:
        return [
            InitialAttemptHandler(self.rpc, self.config),
            ErrorAnalysisHandler(),
            TierExecutionHandler(TieredDiscovery(registry=registry)),
            ResultBuilder(self.rpc, self.config, telemetry=self._telemetry),
        ]

    @property
    def stage_names(self) -> tuple[str, ...]:
        """Return the pipeline's stage names in execution order."""
        return tuple(_stage_name(h) for h in self._pipeline)

    async def execute_with_format_discovery(
        self,
        method: str,
        params: Any = None,
        port: int | None = None,
        initial_debug: Iterable[str] = (),
    ) -> EnhancedResult:
        """Call ``method`` and repair a format error if one comes back.

        Args:
            method: Remote method name, e.g. ``bevy/spawn``.
            params: JSON parameters, sent as-is on the first attempt.
            port: Target port; the configured port when omitted.
            initial_debug: Entries to seed the debug trail with.

        Returns:
            The final result with any corrections and the debug trail.

        Raises:
            TransportError: A request could not be delivered.
            ProtocolError: A response was not valid JSON-RPC.
            PipelineError: A stage reported a failure.
            InvariantViolationError: A stage broke the pipeline contract.
        """
        current: Any = DiscoveryContext(
            method=method,
            original_params=params,
            port=port,
            debug_trail=tuple(initial_debug),
        )
        ctx = self._telemetry
        stage = None

        for handler in self._pipeline:
            stage = _stage_name(handler)
            with ctx("discovery.stage", stage=stage):
                result = await handler.handle(current)

            if not isinstance(result, Success | Failure):
                ctx.count("pipeline.invariant_violation", stage=stage)
                raise InvariantViolationError(
                    "Handler returned a non-Result value; expected Success|Failure.",
                    stage_name=stage,
                )
            if isinstance(result, Failure):
                ctx.count("pipeline.error", stage=stage)
                raise PipelineError(str(result.error), stage, result.error)
            current = result.value

        if not isinstance(current, EnhancedResult):
            raise InvariantViolationError(
                "Pipeline ended without an EnhancedResult; the final stage must build one.",
                stage_name=stage,
            )

        for line in current.debug_info:
            log.debug("[%s] %s", method, line)
        return current


def create_executor(
    rpc: RpcExecutor | None = None,
    config: FrozenConfig | None = None,
) -> FormatDiscoveryExecutor:
    """Create an executor, building a ``BrpClient`` when no RPC executor is given.

    This is the only place where ambient configuration is resolved.
    """
    final_config = config if config is not None else resolve_config()
    client = rpc if rpc is not None else BrpClient(final_config)
    return FormatDiscoveryExecutor(client, final_config)


async def execute_with_format_discovery(
    method: str,
    params: Any = None,
    port: int | None = None,
    initial_debug: Iterable[str] = (),
    *,
    rpc: RpcExecutor | None = None,
    config: FrozenConfig | None = None,
) -> EnhancedResult:
    """One-shot convenience wrapper around ``FormatDiscoveryExecutor``.

    When no ``rpc`` is supplied a ``BrpClient`` is created for this call and
    closed afterwards.
    """
    if rpc is not None:
        return await create_executor(rpc, config).execute_with_format_discovery(
            method, params, port, initial_debug
        )

    async with BrpClient(config) as client:
        executor = FormatDiscoveryExecutor(client, client.config)
        return await executor.execute_with_format_discovery(
            method, params, port, initial_debug
        )
