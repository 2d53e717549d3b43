"""Discovery pipeline stages.

Stages run in order: initial attempt, error analysis, tier execution and
result building. Each takes the previous stage's state and returns the next.
"""

from .base import BaseAsyncHandler
from .error_analysis import (
    ErrorAnalysisHandler,
    is_type_format_error,
    needs_format_discovery,
)
from .initial_attempt import InitialAttemptHandler
from .result_builder import ResultBuilder
from .tier_execution import TierExecutionHandler, TieredDiscovery

__all__ = [
    "BaseAsyncHandler",
    "ErrorAnalysisHandler",
    "InitialAttemptHandler",
    "ResultBuilder",
    "TierExecutionHandler",
    "TieredDiscovery",
    "is_type_format_error",
    "needs_format_discovery",
]
