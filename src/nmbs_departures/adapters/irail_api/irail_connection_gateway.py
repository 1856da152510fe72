"""iRail connection gateway - adapter implementing the ConnectionGateway port."""

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from nmbs_departures.adapters.irail_api.constants import (
    IRAIL_CONNECTIONS_URL,
    IRAIL_DATE_FORMAT,
    IRAIL_TIME_FORMAT,
)
from nmbs_departures.domain.constants import DETAIL_WINDOW_LEAD_MINUTES
from nmbs_departures.domain.models.protocol_error import ErrorKind
from nmbs_departures.domain.models.raw_connection import RawSearchResponse
from nmbs_departures.domain.models.result import Err, Result
from nmbs_departures.domain.ports import ConnectionGateway

if TYPE_CHECKING:
    from nmbs_departures.adapters.irail_api.irail_http_client import IRailHttpClient
    from nmbs_departures.domain.models.connection_identifier import ConnectionIdentifier

logger = logging.getLogger(__name__)


def detail_window(identifier: "ConnectionIdentifier", timezone: ZoneInfo) -> dict[str, str]:
    """Query parameters starting the search shortly before the identified departure.

    The window is rendered in the network's local time, so a departure just
    after midnight yields the previous day's date.
    """
    start = datetime.fromtimestamp(identifier.departure_epoch_seconds, timezone) - timedelta(
        minutes=DETAIL_WINDOW_LEAD_MINUTES
    )
    return {"date": start.strftime(IRAIL_DATE_FORMAT), "time": start.strftime(IRAIL_TIME_FORMAT)}


def _check_stations(from_station_id: str, to_station_id: str) -> Err | None:
    if not from_station_id or not to_station_id:
        return Err.of(ErrorKind.INVALID_REQUEST, "Missing station id")
    if from_station_id == to_station_id:
        return Err.of(ErrorKind.INVALID_REQUEST, "Departure and arrival stations are the same")
    return None


class IRailConnectionGateway(ConnectionGateway):
    """Fetches connections from the iRail connections endpoint."""

    def __init__(
        self,
        client: "IRailHttpClient",
        connections_url: str = IRAIL_CONNECTIONS_URL,
        timezone: str = "Europe/Brussels",
    ) -> None:
        """Initialize the gateway.

        Args:
            client: HTTP client used for requests.
            connections_url: Connections endpoint.
            timezone: Timezone in which iRail interprets date and time parameters.
        """
        self._client = client
        self._connections_url = connections_url
        self._timezone = ZoneInfo(timezone)

    async def search_connections(
        self, from_station_id: str, to_station_id: str
    ) -> Result[RawSearchResponse]:
        invalid = _check_stations(from_station_id, to_station_id)
        if invalid is not None:
            logger.warning(f"Invalid search {from_station_id!r} -> {to_station_id!r}")
            return invalid

        logger.info(f"Fetching connections {from_station_id} -> {to_station_id}")
        return await self._client.get(
            self._connections_url,
            {"from": from_station_id, "to": to_station_id},
            RawSearchResponse,
        )

    async def fetch_connection_detail(
        self,
        from_station_id: str,
        to_station_id: str,
        identifier: "ConnectionIdentifier",
    ) -> Result[RawSearchResponse]:
        invalid = _check_stations(from_station_id, to_station_id)
        if invalid is not None:
            logger.warning(f"Invalid detail request {from_station_id!r} -> {to_station_id!r}")
            return invalid

        window = detail_window(identifier, self._timezone)
        logger.info(
            f"Fetching connection detail for {identifier.vehicle_ref} "
            f"({window['date']} {window['time']})"
        )
        return await self._client.get(
            self._connections_url,
            {"from": from_station_id, "to": to_station_id, **window},
            RawSearchResponse,
        )
