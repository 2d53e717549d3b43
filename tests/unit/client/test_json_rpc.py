import pytest

from brp_bridge.client import build_request, parse_response
from brp_bridge.core.exceptions import ProtocolError
from brp_bridge.core.types import BrpError, Failure, Success


@pytest.mark.unit
def test_build_request_envelope():
    assert build_request("bevy/list", None) == {
        "jsonrpc": "2.0",
        "method": "bevy/list",
        "id": 1,
        "params": None,
    }


@pytest.mark.unit
def test_build_request_rejects_empty_method():
    with pytest.raises(ValueError):
        build_request("")


@pytest.mark.unit
def test_parse_result_and_null_result():
    assert parse_response({"jsonrpc": "2.0", "id": 1, "result": [1, 2]}) == Success(
        [1, 2]
    )
    assert parse_response({"jsonrpc": "2.0", "id": 1, "result": None}) == Success(None)


@pytest.mark.unit
def test_parse_error_member_keeps_data():
    body = {
        "jsonrpc": "2.0",
        "id": 1,
        "error": {"code": -23402, "message": "bad", "data": {"hint": 1}},
    }
    assert parse_response(body) == Failure(
        BrpError(code=-23402, message="bad", data={"hint": 1})
    )


@pytest.mark.unit
def test_null_error_member_is_treated_as_success():
    assert parse_response({"error": None, "result": 3}) == Success(3)


@pytest.mark.unit
@pytest.mark.parametrize(
    "body",
    [
        [],
        "text",
        {"error": "oops"},
        {"error": {"code": "x", "message": "m"}},
        {"error": {"code": True, "message": "m"}},
        {"error": {"code": -1}},
    ],
)
def test_malformed_bodies_raise_protocol_error(body):
    with pytest.raises(ProtocolError):
        parse_response(body)
