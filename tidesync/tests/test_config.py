"""Tests for environment-driven settings."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from tidesync.config import Settings, get_settings

REQUIRED = {
    "TIDEPOOL_EMAIL": "pump@example.com",
    "TIDEPOOL_PASSWORD": "secret",
    "NIGHTSCOUT_URL": "https://ns.example.com",
}


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_defaults(env: pytest.MonkeyPatch) -> None:
    settings = Settings(_env_file=None)
    assert settings.tidepool_base_url == "https://api.tidepool.org"
    assert settings.nightscout_api_secret == ""
    assert settings.target_low == 3.7
    assert settings.sync_since is None
    assert settings.sync_till is None


def test_reads_environment(env: pytest.MonkeyPatch) -> None:
    env.setenv("TARGET_LOW", "4.2")
    env.setenv("SYNC_SINCE", "2024-05-01T00:00:00")
    env.setenv("NIGHTSCOUT_API_SECRET", "ns-secret")

    settings = Settings(_env_file=None)

    assert settings.target_low == 4.2
    assert settings.sync_since == datetime(2024, 5, 1)
    assert settings.nightscout_api_secret == "ns-secret"


def test_credentials_required(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached(env: pytest.MonkeyPatch) -> None:
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


def test_app_metadata_not_configurable(env: pytest.MonkeyPatch) -> None:
    env.setenv("APP_VERSION", "9.9.9")
    settings = Settings(_env_file=None)
    assert "app_version" not in settings.model_dump()
