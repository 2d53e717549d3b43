"""Configuration resolution: defaults, environment and overrides."""

import dataclasses

import pytest

from brp_bridge.config import BrpSettings, FrozenConfig, resolve_config
from brp_bridge.core.exceptions import ConfigurationError


@pytest.mark.unit
def test_defaults():
    config = resolve_config()
    assert config == FrozenConfig(
        host="localhost", port=15702, timeout_seconds=30.0, debug_payloads=False
    )
    assert config.base_url == "http://localhost"


@pytest.mark.unit
def test_environment_is_read(monkeypatch):
    monkeypatch.setenv("BRP_PORT", "15703")
    monkeypatch.setenv("BRP_DEBUG_PAYLOADS", "1")
    monkeypatch.setenv("BRP_HOST", "  game.local ")

    config = resolve_config()

    assert config.port == 15703
    assert config.debug_payloads is True
    assert config.host == "game.local"


@pytest.mark.unit
def test_overrides_beat_environment(monkeypatch):
    monkeypatch.setenv("BRP_PORT", "15703")
    assert resolve_config({"port": 16000}).port == 16000


@pytest.mark.unit
def test_unknown_override_keys_are_ignored():
    assert resolve_config({"api_key": "x", "timeout_seconds": 5}).timeout_seconds == 5.0


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [{"port": 0}, {"port": 70000}, {"timeout_seconds": 0}, {"host": "   "}],
)
def test_invalid_values_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError, match="Invalid bridge configuration"):
        resolve_config(overrides)


@pytest.mark.unit
def test_invalid_environment_value_raises(monkeypatch):
    monkeypatch.setenv("BRP_TIMEOUT_SECONDS", "-1")
    with pytest.raises(ConfigurationError):
        resolve_config()


@pytest.mark.unit
def test_frozen_config_is_immutable():
    config = resolve_config()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.port = 1  # type: ignore[misc]


@pytest.mark.unit
def test_settings_to_dict_matches_frozen_fields():
    fields = {f.name for f in dataclasses.fields(FrozenConfig)}
    assert set(BrpSettings().to_dict()) == fields
