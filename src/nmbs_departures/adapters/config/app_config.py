"""12-factor configuration adapter using environment variables."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nmbs_departures.domain.constants import (
    DEBOUNCE_DELAY_MS,
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
)


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_prefix="NMBS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # iRail API configuration
    irail_connections_url: str = Field(
        default="https://api.irail.be/connections/",
        description="iRail connections endpoint",
    )
    irail_stations_url: str = Field(
        default="https://api.irail.be/v1/stations",
        description="iRail station list endpoint",
    )
    irail_user_agent: str = Field(
        default="WerknaamCommuter <https://werknaam.be, commuter@werknaam.be>",
        description="User-Agent sent to iRail (their usage policy asks for contact details)",
    )
    irail_timeout_seconds: int = Field(
        default=10, description="Timeout for iRail requests in seconds"
    )
    language: str = Field(
        default=DEFAULT_LANGUAGE,
        description="Default language for station names, overridden by the configuration page",
    )
    timezone: str = Field(
        default="Europe/Brussels",
        description="Timezone for clock times and schedules (IANA timezone name)",
    )

    # Protocol configuration
    debounce_delay_ms: int = Field(
        default=DEBOUNCE_DELAY_MS,
        description="Delay before a coalesced search request is executed",
    )
    schedule_evaluation_interval_seconds: int = Field(
        default=60,
        description="Interval between smart schedule evaluations (0 disables the timer)",
    )

    # Device and persistence
    device_url: str = Field(
        default="ws://127.0.0.1:9000/device",
        description="WebSocket URL of the watch bridge",
    )
    storage_file: str = Field(
        default="nmbs_storage.json",
        description="JSON file holding persisted companion state",
    )

    # Configuration server
    host: str = Field(default="127.0.0.1", description="Host to bind the configuration server to")
    port: int = Field(default=8000, description="Port to bind the configuration server to")

    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate language is one iRail supports."""
        if v.lower() not in SUPPORTED_LANGUAGES:
            raise ValueError(f"language must be one of {', '.join(SUPPORTED_LANGUAGES)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("debounce_delay_ms", "schedule_evaluation_interval_seconds")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @property
    def storage_path(self) -> Path:
        return Path(self.storage_file)

    @classmethod
    def for_testing(cls, **overrides: object) -> "AppConfig":
        """Build a configuration that ignores the environment's .env file."""
        return cls(_env_file=None, **overrides)  # type: ignore[call-arg]
