"""Configuration update domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConfigurationUpdate(BaseModel):
    """Settings posted by the configuration page.

    Schedules are kept raw here; invalid rules are dropped individually when
    the update is applied so one bad rule does not reject the whole update.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    favorite_stations: list[str] | None = Field(default=None, alias="favoriteStations")
    smart_schedules: list[dict[str, Any]] | None = Field(default=None, alias="smartSchedules")
    language: str | None = None
