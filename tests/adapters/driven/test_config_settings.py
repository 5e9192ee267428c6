"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from hookrelay.adapters.driven.config.settings import QueueSettings, Settings, load_settings

__all__ = []

ENV_VARS = (
    "QUEUE_TYPE",
    "QUEUE_KEY",
    "QUEUE_HOSTNAME",
    "QUEUE_PORT",
    "QUEUE_MAX_CONNECTIONS",
    "RUNNER_TYPE",
    "MAX_RETRIES",
    "BACKOFF_BASE_MILLIS",
    "BACKOFF_MAX_MILLIS",
    "HTTP_TIMEOUT_SECONDS",
    "SHUTDOWN_GRACE_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    """Start every test from an empty relay environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults() -> None:
    """Without environment, defaults should apply."""
    settings = load_settings()

    assert settings.queue == QueueSettings()
    assert settings.queue.type == "in_memory"
    assert settings.queue.key == "queue"
    assert settings.queue.hostname == "localhost"
    assert settings.queue.port == 6379
    assert settings.runner_type == "sequential"
    assert settings.max_retries == 5
    assert settings.backoff_base_millis == 50
    assert settings.backoff_max_millis == 10_000


def test_load_settings_reads_environment(monkeypatch) -> None:
    """Environment variables should override defaults."""
    monkeypatch.setenv("QUEUE_TYPE", "redis")
    monkeypatch.setenv("QUEUE_KEY", "webhooks")
    monkeypatch.setenv("QUEUE_HOSTNAME", "redis.internal")
    monkeypatch.setenv("QUEUE_PORT", "6380")
    monkeypatch.setenv("MAX_RETRIES", "2")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "2.5")

    settings = load_settings()

    assert settings.queue.type == "redis"
    assert settings.queue.key == "webhooks"
    assert settings.queue.hostname == "redis.internal"
    assert settings.queue.port == 6380
    assert settings.max_retries == 2
    assert settings.http_timeout_sec == 2.5


def test_load_settings_rejects_non_integer(monkeypatch) -> None:
    """Non-numeric values should name the offending variable."""
    monkeypatch.setenv("QUEUE_PORT", "sixthousand")

    with pytest.raises(RuntimeError, match="QUEUE_PORT must be an integer"):
        load_settings()


def test_load_settings_rejects_unknown_queue_type(monkeypatch) -> None:
    """Only registered queue kinds are accepted."""
    monkeypatch.setenv("QUEUE_TYPE", "kafka")

    with pytest.raises(ValueError):
        load_settings()


def test_load_settings_rejects_negative_retries(monkeypatch) -> None:
    """Retry budget cannot be negative."""
    monkeypatch.setenv("MAX_RETRIES", "-1")

    with pytest.raises(ValidationError):
        load_settings()


def test_settings_rejects_cap_below_base() -> None:
    """The backoff cap must not be lower than the base."""
    with pytest.raises(ValueError, match="BACKOFF_MAX_MILLIS"):
        Settings(backoff_base_millis=100, backoff_max_millis=10)


def test_queue_settings_rejects_bad_port() -> None:
    """Ports outside 1..65535 are invalid."""
    with pytest.raises(ValidationError):
        QueueSettings(port=70000)
