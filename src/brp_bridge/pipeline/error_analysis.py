"""Error analysis stage: decide whether a failure is worth repairing."""

import logging
from typing import Never

from brp_bridge.constants import (
    COMPONENT_FORMAT_ERROR_CODE,
    FORMAT_DISCOVERY_METHODS,
    RESOURCE_FORMAT_ERROR_CODE,
)
from brp_bridge.core.types import (
    AnalyzedCommand,
    AttemptedCommand,
    BrpError,
    BrpResult,
    Failure,
    Result,
    Success,
)
from brp_bridge.pipeline.base import BaseAsyncHandler

log = logging.getLogger(__name__)

_FORMAT_ERROR_CODES = frozenset({COMPONENT_FORMAT_ERROR_CODE, RESOURCE_FORMAT_ERROR_CODE})


def is_type_format_error(error: BrpError) -> bool:
    """True if the error code marks a component or resource format error."""
    return error.code in _FORMAT_ERROR_CODES


def needs_format_discovery(result: BrpResult, method: str) -> BrpError | None:
    """Return the error to repair, or ``None`` when discovery does not apply."""
    if not isinstance(result, Failure):
        return None
    if is_type_format_error(result.error) and method in FORMAT_DISCOVERY_METHODS:
        return result.error
    return None


def _skip_reason(result: BrpResult, method: str) -> str:
    if isinstance(result, Success):
        return "Format discovery skipped: request succeeded"
    if not is_type_format_error(result.error):
        code = result.error.code
        return f"Format discovery skipped: error code {code} is not a format error"
    return f"Format discovery skipped: method '{method}' is not eligible"


class ErrorAnalysisHandler(BaseAsyncHandler[AttemptedCommand, AnalyzedCommand, Never]):
    """Classifies the initial outcome; never fails."""

    stage_name = "error_analysis"

    async def handle(self, command: AttemptedCommand) -> Result[AnalyzedCommand, Never]:
        """Attach the recoverable error, if any, and record the decision."""
        ctx = command.context
        error = needs_format_discovery(command.initial_result, ctx.method)
        if error is None:
            reason = _skip_reason(command.initial_result, ctx.method)
        else:
            reason = f"Format error {error.code} detected, starting tiered discovery"
        log.debug(reason)
        return Success(
            AnalyzedCommand(
                context=ctx.add_debug(reason),
                initial_result=command.initial_result,
                discovery_error=error,
            )
        )
