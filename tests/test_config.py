"""Tests for environment-driven settings."""

import pytest

from neurofuel import config
from neurofuel.config import Settings, load_settings
from neurofuel.errors import ConfigError

ENV_VARS = [
    "OPENAI_API_KEY", "USE_MOCK", "GPT_ID", "OPENAI_MODEL", "OPENAI_TIMEOUT",
    "HOST", "PORT", "CORS_ALLOW_ORIGINS", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: False)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.openai_api_key == ""
    assert settings.use_mock is False
    assert settings.gpt_id is None
    assert settings.model == "gpt-4o-mini"
    assert settings.request_timeout == 30.0
    assert settings.port == 3000
    assert settings.cors_origins == ["*"]
    assert settings.should_mock() is True


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-123")
    monkeypatch.setenv("GPT_ID", "g-neurofuel")
    monkeypatch.setenv("OPENAI_TIMEOUT", "12.5")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000, https://app.example.com")

    settings = load_settings()

    assert settings.has_key
    assert settings.gpt_id == "g-neurofuel"
    assert settings.request_timeout == 12.5
    assert settings.port == 8080
    assert settings.cors_origins == ["http://localhost:3000", "https://app.example.com"]
    assert settings.should_mock() is False
    assert settings.should_mock(requested=True) is True


@pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("0", False), ("yes", False), ("TRUE", False)])
def test_use_mock_flag(monkeypatch, value, expected):
    monkeypatch.setenv("USE_MOCK", value)
    assert load_settings().use_mock is expected


def test_forced_mock_wins_over_key():
    settings = Settings(openai_api_key="sk-test", use_mock=True)
    assert settings.should_mock() is True


def test_bad_port(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ConfigError):
        load_settings()


@pytest.mark.parametrize("value", ["soon", "0", "-5"])
def test_bad_timeout(monkeypatch, value):
    monkeypatch.setenv("OPENAI_TIMEOUT", value)
    with pytest.raises(ConfigError):
        load_settings()
