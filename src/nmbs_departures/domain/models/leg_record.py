"""Journey leg domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LegRecord:
    """One uninterrupted vehicle segment of a connection."""

    depart_station: str
    arrive_station: str
    depart_time: str
    arrive_time: str
    depart_platform: str
    arrive_platform: str
    depart_delay: int
    arrive_delay: int
    vehicle: str
    direction: str
    stop_count: int
    depart_platform_changed: bool
    arrive_platform_changed: bool
