"""iRail API adapters."""

from nmbs_departures.adapters.irail_api.irail_connection_gateway import IRailConnectionGateway
from nmbs_departures.adapters.irail_api.irail_http_client import IRailHttpClient
from nmbs_departures.adapters.irail_api.irail_station_repository import IRailStationRepository

__all__ = ["IRailConnectionGateway", "IRailHttpClient", "IRailStationRepository"]
