"""Unit tests for environment-driven settings and ShieldClient.from_settings()."""

from __future__ import annotations

import pytest

from elysium_shield.client.client import ShieldClient
from elysium_shield.config.constants import DEFAULT_API_URL
from elysium_shield.config.settings import ShieldSettings, get_settings
from elysium_shield.core.exceptions import ShieldConfigurationError


def test_settings_defaults() -> None:
    settings = ShieldSettings(_env_file=None)

    assert settings.api_key == ""
    assert settings.api_url == DEFAULT_API_URL
    assert settings.timeout_ms == 10_000
    assert settings.debug is False


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHIELD_API_KEY", "sk_env_key")
    monkeypatch.setenv("SHIELD_API_URL", "http://localhost:3000")
    monkeypatch.setenv("SHIELD_TIMEOUT_MS", "2500")
    monkeypatch.setenv("SHIELD_DEBUG", "true")

    settings = get_settings()

    assert settings.api_key == "sk_env_key"
    assert settings.api_url == "http://localhost:3000"
    assert settings.timeout_ms == 2500
    assert settings.debug is True


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHIELD_API_KEY", "first")
    first = get_settings()
    monkeypatch.setenv("SHIELD_API_KEY", "second")

    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().api_key == "second"


def test_from_settings_builds_client() -> None:
    settings = ShieldSettings(
        _env_file=None,
        api_key="sk_settings",
        api_url="http://localhost:3000",
        timeout_ms=1234,
    )

    client = ShieldClient.from_settings(settings)

    assert client.config.api_key == "sk_settings"
    assert client.config.api_url == "http://localhost:3000"
    assert client.config.timeout_ms == 1234


def test_from_settings_without_api_key_raises() -> None:
    with pytest.raises(ShieldConfigurationError):
        ShieldClient.from_settings(ShieldSettings(_env_file=None))
