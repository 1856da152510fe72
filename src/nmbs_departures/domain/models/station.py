"""Station domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StationCacheEntry:
    """An iRail station id with its display name."""

    id: str
    name: str
