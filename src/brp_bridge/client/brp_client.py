"""Async HTTP client for the Bevy Remote Protocol.

``BrpClient`` sends one JSON-RPC request per ``execute`` call and reports the
remote outcome as ``Success``/``Failure``. Anything that prevents a
well-formed response from arriving is raised instead:

* ``TransportError``: connection failures, timeouts, non-2xx status.
* ``ProtocolError``: the body is not JSON or not a JSON-RPC response.

The underlying ``httpx.AsyncClient`` is created lazily and pooled, so one
``BrpClient`` can serve many concurrent discovery invocations.
"""

import asyncio
import json
import logging
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

import httpx

from brp_bridge.config import FrozenConfig, resolve_config
from brp_bridge.constants import BRP_ENDPOINT_PATH
from brp_bridge.core.exceptions import ProtocolError, TransportError
from brp_bridge.core.types import BrpResult

from .json_rpc import build_request, parse_response

log = logging.getLogger(__name__)


@runtime_checkable
class RpcExecutor(Protocol):
    """Anything that can perform a single BRP call."""

    async def execute(
        self, method: str, params: Any = None, port: int | None = None
    ) -> BrpResult:
        """Send ``method`` with ``params`` to the app listening on ``port``."""
        ...


class BrpClient:
    """Pooled JSON-RPC client bound to one host."""

    def __init__(
        self,
        config: FrozenConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Resolved configuration; resolved from the environment when
                omitted.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        """
        self.config = config if config is not None else resolve_config()
        self._transport = transport
        self._http: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    def url_for(self, port: int | None = None) -> str:
        """Return the endpoint URL for ``port`` (default from config)."""
        effective = port if port is not None else self.config.port
        return f"{self.config.base_url}:{effective}{BRP_ENDPOINT_PATH}"

    async def execute(
        self, method: str, params: Any = None, port: int | None = None
    ) -> BrpResult:
        """Perform one JSON-RPC call.

        Returns:
            ``Success(result)`` or ``Failure(BrpError)`` for a remote error.

        Raises:
            TransportError: On connection failure, timeout or non-2xx status.
            ProtocolError: If the response body is not a JSON-RPC response.
        """
        url = self.url_for(port)
        payload = build_request(method, params)
        http = await self._client()

        log.debug("BRP request %s -> %s", method, url)
        try:
            response = await http.post(url, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request to {url} timed out after {self.config.timeout_seconds}s",
                url=url,
            ) from e
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"HTTP error {e.response.status_code} from {url}", url=url
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to reach {url}: {e}", url=url) from e

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ProtocolError(f"Response from {url} is not valid JSON") from e

        return parse_response(body)

    async def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            async with self._lock:
                if self._http is None:
                    self._http = httpx.AsyncClient(
                        timeout=self.config.timeout_seconds,
                        transport=self._transport,
                    )
        return self._http

    async def aclose(self) -> None:
        """Close the pooled HTTP client, if one was created."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
