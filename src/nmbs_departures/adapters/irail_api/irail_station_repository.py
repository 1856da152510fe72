"""iRail station repository - adapter implementing the StationRepository port."""

import logging
from typing import TYPE_CHECKING

from nmbs_departures.adapters.irail_api.constants import IRAIL_STATIONS_URL
from nmbs_departures.domain.models.raw_connection import RawStationListResponse
from nmbs_departures.domain.models.result import Err, Ok, Result
from nmbs_departures.domain.models.station import StationCacheEntry
from nmbs_departures.domain.ports import StationRepository

if TYPE_CHECKING:
    from nmbs_departures.adapters.irail_api.irail_http_client import IRailHttpClient

logger = logging.getLogger(__name__)


class IRailStationRepository(StationRepository):
    """Fetches the full NMBS station list."""

    def __init__(self, client: "IRailHttpClient", stations_url: str = IRAIL_STATIONS_URL) -> None:
        self._client = client
        self._stations_url = stations_url

    async def fetch_stations(self) -> Result[list[StationCacheEntry]]:
        result = await self._client.get(self._stations_url, {}, RawStationListResponse)
        if isinstance(result, Err):
            return result

        stations = [
            StationCacheEntry(
                id=station.id, name=station.name or station.standardname or station.id
            )
            for station in result.value.station
            if station.id
        ]
        logger.info(f"Fetched {len(stations)} stations from iRail")
        return Ok(stations)
