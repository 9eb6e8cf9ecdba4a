"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from core.config import Settings, settings
from core.modes import Mode


def test_defaults(monkeypatch):
    for var in ("BOT_API_URL", "POLL_INTERVAL_MS", "DEFAULT_MODE", "REQUEST_TIMEOUT_S"):
        monkeypatch.delenv(var, raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.api_base_url == "http://localhost:8080/api"
    assert cfg.poll_interval_ms == 5000
    assert cfg.poll_interval_s == pytest.approx(5.0)
    assert cfg.default_mode is Mode.TRAINING


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BOT_API_URL", "http://bot:9000/api")
    monkeypatch.setenv("POLL_INTERVAL_MS", "250")
    monkeypatch.setenv("DEFAULT_MODE", "trading")
    cfg = Settings(_env_file=None)
    assert cfg.api_base_url == "http://bot:9000/api"
    assert cfg.poll_interval_ms == 250
    assert cfg.default_mode is Mode.TRADING


def test_invalid_values_rejected(monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL_MS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
    monkeypatch.setenv("POLL_INTERVAL_MS", "1000")
    monkeypatch.setenv("DEFAULT_MODE", "paper")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_module_settings_singleton():
    assert settings.poll_interval_ms > 0
    assert isinstance(settings.default_mode, Mode)
