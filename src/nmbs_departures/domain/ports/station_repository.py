"""Station repository port."""

from typing import Protocol

from nmbs_departures.domain.models.result import Result
from nmbs_departures.domain.models.station import StationCacheEntry


class StationRepository(Protocol):
    """Port for retrieving the full station list."""

    async def fetch_stations(self) -> Result[list[StationCacheEntry]]:
        """Fetch all stations with their display names."""
        ...
