"""
Global test configuration for the BRP bridge.
"""

from collections.abc import Iterable
import os
from typing import Any

import pytest

from brp_bridge.config import FrozenConfig
from brp_bridge.core.types import BrpError, BrpResult, Failure, Success


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_brp_env(request, monkeypatch):
    """Ensure a clean BRP_* environment for each test.

    Escape hatch: mark a test with @pytest.mark.allow_env_pollution to keep
    the current environment unchanged.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("BRP_"):
            monkeypatch.delenv(key, raising=False)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with a fake remote app",
        "allow_env_pollution: Keep BRP_* environment variables for this test",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


class FakeRpc:
    """Scripted RPC executor.

    Each ``execute`` call consumes the next scripted outcome: a result is
    returned, an exception is raised. Calls are recorded for assertions.
    """

    def __init__(self, outcomes: Iterable[BrpResult | Exception]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[tuple[str, Any, int | None]] = []

    async def execute(
        self, method: str, params: Any = None, port: int | None = None
    ) -> BrpResult:
        self.calls.append((method, params, port))
        if not self._outcomes:
            raise AssertionError(f"Unexpected extra call to {method}")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_rpc():
    """Factory for scripted RPC executors."""

    def _make(*outcomes: BrpResult | Exception) -> FakeRpc:
        return FakeRpc(outcomes)

    return _make


@pytest.fixture
def config() -> FrozenConfig:
    """A resolved configuration with defaults and payload dumps disabled."""
    return FrozenConfig(host="localhost", port=15702, timeout_seconds=30.0)


@pytest.fixture
def format_error():
    """Factory for component format errors."""

    def _make(message: str, code: int = -23402) -> Failure[BrpError]:
        return Failure(BrpError(code=code, message=message))

    return _make


@pytest.fixture
def ok():
    """Factory for successful results."""

    def _make(value: Any = None) -> Success[Any]:
        return Success(value)

    return _make
