"""Exceptions raised by the BRP bridge.

Only orchestration faults and fatal transport/protocol failures are modelled
as exceptions. Remote format errors and the absence of a correction are
ordinary outcomes carried by ``EnhancedResult``.
"""


class BrpBridgeError(Exception):
    """Base exception for all bridge errors."""


class TransportError(BrpBridgeError):
    """Raised when a request cannot be delivered or times out."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        """Initialize with the target URL when known."""
        super().__init__(message)
        self.url = url


class ProtocolError(BrpBridgeError):
    """Raised when a response is not a well-formed JSON-RPC response."""


class ConfigurationError(BrpBridgeError):
    """Raised when settings fail validation."""


class PipelineError(BrpBridgeError):
    """Raised when a discovery stage returns a failure result."""

    def __init__(
        self, message: str, handler_name: str, underlying_error: Exception
    ) -> None:
        """Record which stage failed and the error it reported."""
        super().__init__(f"Error in handler '{handler_name}': {message}")
        self.handler_name = handler_name
        self.underlying_error = underlying_error


class InvariantViolationError(BrpBridgeError):
    """Raised when a stage breaks the executor's structural contract."""

    def __init__(self, message: str, *, stage_name: str | None = None) -> None:
        """Attach the offending stage name when known."""
        super().__init__(message)
        self.stage_name = stage_name
