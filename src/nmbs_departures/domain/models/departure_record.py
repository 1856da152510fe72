"""Departure record domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DepartureRecord:
    """Display-ready projection of one connection, already truncated for the device."""

    index: int
    destination: str
    depart_time: str
    depart_timestamp: int
    arrive_time: str
    platform: str
    train_type: str
    duration: str
    depart_delay: int  # whole minutes
    arrive_delay: int  # whole minutes
    is_direct: bool
    platform_changed: bool
