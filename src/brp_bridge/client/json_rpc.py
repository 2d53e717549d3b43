"""JSON-RPC 2.0 envelope handling for BRP requests and responses."""

from typing import Any

from brp_bridge.constants import (
    JSONRPC_DEFAULT_ID,
    JSONRPC_FIELD,
    JSONRPC_FIELD_ERROR,
    JSONRPC_FIELD_ID,
    JSONRPC_FIELD_METHOD,
    JSONRPC_FIELD_PARAMS,
    JSONRPC_FIELD_RESULT,
    JSONRPC_VERSION,
)
from brp_bridge.core.exceptions import ProtocolError
from brp_bridge.core.types import BrpError, BrpResult, Failure, Success


def build_request(
    method: str, params: Any = None, request_id: int = JSONRPC_DEFAULT_ID
) -> dict[str, Any]:
    """Build a request envelope; ``params`` is serialized as null when absent."""
    if not isinstance(method, str) or not method:
        raise ValueError("method must be a non-empty string")
    return {
        JSONRPC_FIELD: JSONRPC_VERSION,
        JSONRPC_FIELD_METHOD: method,
        JSONRPC_FIELD_ID: request_id,
        JSONRPC_FIELD_PARAMS: params,
    }


def parse_response(body: Any) -> BrpResult:
    """Convert a decoded response body into a result.

    Raises:
        ProtocolError: If the body is not an object or its error member is
            malformed.
    """
    if not isinstance(body, dict):
        raise ProtocolError(
            f"Expected a JSON object response, got {type(body).__name__}"
        )

    if JSONRPC_FIELD_ERROR in body and body[JSONRPC_FIELD_ERROR] is not None:
        return Failure(_parse_error(body[JSONRPC_FIELD_ERROR]))

    return Success(body.get(JSONRPC_FIELD_RESULT))


def _parse_error(raw: Any) -> BrpError:
    if not isinstance(raw, dict):
        raise ProtocolError("Malformed error member: expected an object")
    code = raw.get("code")
    message = raw.get("message")
    if not isinstance(code, int) or isinstance(code, bool):
        raise ProtocolError(f"Malformed error member: invalid code {code!r}")
    if not isinstance(message, str):
        raise ProtocolError("Malformed error member: message must be a string")
    return BrpError(code=code, message=message, data=raw.get("data"))
