"""Remote procedure call layer: JSON-RPC envelopes and the HTTP client."""

from .brp_client import BrpClient, RpcExecutor
from .json_rpc import build_request, parse_response

__all__ = ["BrpClient", "RpcExecutor", "build_request", "parse_response"]
