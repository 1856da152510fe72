"""Station id to name resolution backed by a persisted cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nmbs_departures.domain.models.result import Err

if TYPE_CHECKING:
    from nmbs_departures.application.services.companion_storage import CompanionStorage
    from nmbs_departures.domain.models.station import StationCacheEntry
    from nmbs_departures.domain.ports.station_repository import StationRepository

logger = logging.getLogger(__name__)


class StationDirectory:
    """Resolves station ids using the last known station list.

    The cached list is loaded first so favorites resolve before the network
    list arrives; a successful refresh replaces it.
    """

    def __init__(
        self, storage: CompanionStorage, station_repository: StationRepository | None = None
    ) -> None:
        """Initialize the directory.

        Args:
            storage: Persistence for the station cache.
            station_repository: Source of fresh station lists.
        """
        self._storage = storage
        self._station_repository = station_repository
        self._stations: dict[str, StationCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._stations)

    def load_cached(self) -> bool:
        """Load the persisted cache; returns whether any stations were found."""
        self._set(self._storage.load_station_cache())
        if self._stations:
            logger.info(f"Loaded {len(self._stations)} cached stations")
        return bool(self._stations)

    async def refresh(self) -> bool:
        """Fetch the station list and replace the cache; keeps the old cache on failure."""
        if self._station_repository is None:
            return False

        result = await self._station_repository.fetch_stations()
        if isinstance(result, Err):
            logger.warning(f"Station refresh failed: {result.error}")
            return False
        if not result.value:
            logger.warning("Station list is empty, keeping cached stations")
            return False

        self._set(result.value)
        self._storage.save_station_cache(result.value)
        logger.info(f"Fetched and cached {len(result.value)} stations")
        return True

    def find(self, station_id: str) -> StationCacheEntry | None:
        return self._stations.get(station_id)

    def name_for(self, station_id: str) -> str:
        """Display name of a station, or the id itself when unknown."""
        station = self._stations.get(station_id)
        return station.name if station else station_id

    def _set(self, stations: list[StationCacheEntry]) -> None:
        self._stations = {station.id: station for station in stations}
