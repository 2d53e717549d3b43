"""Format discovery for the Bevy Remote Protocol.

Send a mutation to a running Bevy app; if the app rejects the payload's
format, repair it and retry once:

    from brp_bridge import create_executor

    executor = create_executor()
    outcome = await executor.execute_with_format_discovery(
        "bevy/spawn", {"components": {"my_game::Speed": {"value": 2.0}}}
    )
"""

import importlib.metadata
import logging

from brp_bridge.client import BrpClient, RpcExecutor
from brp_bridge.config import BrpSettings, FrozenConfig, resolve_config
from brp_bridge.core.exceptions import (
    BrpBridgeError,
    ConfigurationError,
    InvariantViolationError,
    PipelineError,
    ProtocolError,
    TransportError,
)
from brp_bridge.core.types import (
    BrpError,
    BrpResult,
    EnhancedResult,
    Failure,
    FormatCorrection,
    Result,
    Success,
    TierInfo,
)
from brp_bridge.discovery.transformers import FormatTransformer, TransformerRegistry
from brp_bridge.executor import (
    FormatDiscoveryExecutor,
    create_executor,
    execute_with_format_discovery,
)
from brp_bridge.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("brp-bridge")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Executor
    "FormatDiscoveryExecutor",
    "create_executor",
    "execute_with_format_discovery",
    # Transport
    "BrpClient",
    "RpcExecutor",
    # Configuration
    "BrpSettings",
    "FrozenConfig",
    "resolve_config",
    # Results
    "BrpError",
    "BrpResult",
    "EnhancedResult",
    "Failure",
    "FormatCorrection",
    "Result",
    "Success",
    "TierInfo",
    # Extension points
    "FormatTransformer",
    "TransformerRegistry",
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "BrpBridgeError",
    "ConfigurationError",
    "InvariantViolationError",
    "PipelineError",
    "ProtocolError",
    "TransportError",
]
