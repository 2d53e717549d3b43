"""BrpClient behavior against an in-process mock transport."""

import json

import httpx
import pytest

from brp_bridge.client import BrpClient, RpcExecutor
from brp_bridge.core.exceptions import ProtocolError, TransportError
from brp_bridge.core.types import BrpError, Failure, Success


def _client(config, handler) -> BrpClient:
    return BrpClient(config, transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_client_satisfies_rpc_executor_protocol(config):
    assert isinstance(BrpClient(config), RpcExecutor)


@pytest.mark.unit
def test_url_for_uses_configured_and_explicit_port(config):
    client = BrpClient(config)
    assert client.url_for() == "http://localhost:15702/jsonrpc"
    assert client.url_for(15800) == "http://localhost:15800/jsonrpc"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_execute_posts_envelope_and_returns_result(config):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"entity": 7}})

    async with _client(config, handler) as client:
        result = await client.execute(
            "bevy/spawn", {"components": {"Foo": 1}}, port=15703
        )

    assert result == Success({"entity": 7})
    assert str(seen[0].url) == "http://localhost:15703/jsonrpc"
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {
        "jsonrpc": "2.0",
        "method": "bevy/spawn",
        "id": 1,
        "params": {"components": {"Foo": 1}},
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remote_error_is_a_failure_not_an_exception(config):
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -23402, "message": "bad"}},
        )

    async with _client(config, handler) as client:
        result = await client.execute("bevy/insert", {"entity": 1, "components": {}})

    assert result == Failure(BrpError(code=-23402, message="bad"))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_http_status_error_becomes_transport_error(config):
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="internal")

    async with _client(config, handler) as client:
        with pytest.raises(TransportError, match="HTTP error 500") as ei:
            await client.execute("bevy/list")

    assert ei.value.url == "http://localhost:15702/jsonrpc"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_timeout_becomes_transport_error(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with _client(config, handler) as client:
        with pytest.raises(TransportError, match="timed out after 30.0s"):
            await client.execute("bevy/list")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_connection_failure_becomes_transport_error(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(config, handler) as client:
        with pytest.raises(TransportError, match="Failed to reach"):
            await client.execute("bevy/list")


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=[1, 2, 3]),
        httpx.Response(200, json={"error": {"code": "bad"}}),
    ],
    ids=["not-json", "array-body", "malformed-error"],
)
async def test_invalid_bodies_become_protocol_error(config, response):
    async with _client(config, lambda _request: response) as client:
        with pytest.raises(ProtocolError):
            await client.execute("bevy/list")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_aclose_is_idempotent_and_client_reopens(config):
    calls = 0

    def handler(_request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": calls})

    client = _client(config, handler)
    await client.aclose()
    assert await client.execute("bevy/list") == Success(1)
    await client.aclose()
    await client.aclose()
    assert await client.execute("bevy/list") == Success(2)
    await client.aclose()
