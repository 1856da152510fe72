"""Smart schedule rule domain model."""

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ScheduleRule(BaseModel):
    """A weekday/time window during which a route becomes the active one.

    Days use 0 for Sunday through 6 for Saturday. Windows are inclusive at
    both ends and cannot wrap past midnight.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    enabled: bool = True
    days: frozenset[int] = Field(default_factory=frozenset)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    from_id: str = Field(alias="fromId")
    to_id: str = Field(alias="toId")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Configuration pages may send numeric ids."""
        return str(v)

    @field_validator("days")
    @classmethod
    def validate_days(cls, v: frozenset[int]) -> frozenset[int]:
        """Validate weekday numbers are within 0 (Sunday) .. 6 (Saturday)."""
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("days must be weekday numbers between 0 (Sunday) and 6 (Saturday)")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, v: str) -> str:
        """Validate zero-padded HH:MM."""
        if not _CLOCK_PATTERN.match(v):
            raise ValueError(f"time must be zero-padded HH:MM, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "ScheduleRule":
        """Validate the window does not wrap past midnight."""
        if self.start_time > self.end_time:
            raise ValueError(
                f"start_time {self.start_time} is after end_time {self.end_time}; "
                "overnight windows are not supported"
            )
        return self


@dataclass(frozen=True)
class ActiveRoute:
    """Route selected by the first matching schedule rule."""

    from_station_id: str
    to_station_id: str
