"""Tests for configuration adapter."""

from pathlib import Path

import pytest

from nmbs_departures.adapters.config import AppConfig


def test_config_loads_defaults() -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    config = AppConfig.for_testing()

    assert config.irail_connections_url == "https://api.irail.be/connections/"
    assert config.language == "en"
    assert config.timezone == "Europe/Brussels"
    assert config.debounce_delay_ms == 500
    assert config.log_level == "INFO"
    assert config.storage_path == Path("nmbs_storage.json")


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given environment variables, when loading config, then they are used."""
    monkeypatch.setenv("NMBS_LANGUAGE", "NL")
    monkeypatch.setenv("NMBS_PORT", "9000")
    monkeypatch.setenv("NMBS_DEVICE_URL", "ws://watch.local/device")
    monkeypatch.setenv("NMBS_LOG_LEVEL", "debug")

    config = AppConfig.for_testing()

    assert config.language == "nl"
    assert config.port == 9000
    assert config.device_url == "ws://watch.local/device"
    assert config.log_level == "DEBUG"


def test_config_validates_language(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given an unsupported language, when loading config, then validation error is raised."""
    monkeypatch.setenv("NMBS_LANGUAGE", "es")

    with pytest.raises(ValueError, match="language must be one of"):
        AppConfig.for_testing()


def test_config_validates_log_level() -> None:
    """Given an unknown log level, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="Invalid log level"):
        AppConfig.for_testing(log_level="LOUD")


def test_config_rejects_negative_intervals() -> None:
    """Given a negative debounce delay, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="must not be negative"):
        AppConfig.for_testing(debounce_delay_ms=-1)
