"""Initial attempt stage: send the request exactly as the caller built it."""

import json
import logging
from typing import Any, Never

from brp_bridge.client import RpcExecutor
from brp_bridge.config import FrozenConfig
from brp_bridge.core.types import (
    AttemptedCommand,
    DiscoveryContext,
    Result,
    Success,
)
from brp_bridge.pipeline.base import BaseAsyncHandler

log = logging.getLogger(__name__)


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, sort_keys=True, default=str)


class InitialAttemptHandler(BaseAsyncHandler[DiscoveryContext, AttemptedCommand, Never]):
    """Performs the first remote call.

    Transport and protocol exceptions from the executor propagate unchanged.
    """

    stage_name = "initial_attempt"

    def __init__(self, rpc: RpcExecutor, config: FrozenConfig) -> None:
        """Initialize with the RPC executor and resolved configuration."""
        self._rpc = rpc
        self._config = config

    async def handle(self, command: DiscoveryContext) -> Result[AttemptedCommand, Never]:
        """Call the remote method once and record the outcome in the trail."""
        ctx = command.add_debug(f"Initial request: {command.method}")
        if self._config.debug_payloads:
            ctx = ctx.add_debug(f"Initial params:\n{_pretty(command.original_params)}")

        result = await self._rpc.execute(
            command.method, command.original_params, command.port
        )

        if isinstance(result, Success):
            ctx = ctx.add_debug("Initial request succeeded")
            if self._config.debug_payloads:
                ctx = ctx.add_debug(f"Initial response:\n{_pretty(result.value)}")
        else:
            error = result.error
            log.debug(
                "Initial %s failed with code %d: %s",
                command.method,
                error.code,
                error.message,
            )
            ctx = ctx.add_debug(
                f"Initial request failed with code {error.code}: {error.message}"
            ).with_error(error)

        return Success(AttemptedCommand(context=ctx, initial_result=result))
