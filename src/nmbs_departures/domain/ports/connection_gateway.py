"""Connection gateway port."""

from typing import Protocol

from nmbs_departures.domain.models.connection_identifier import ConnectionIdentifier
from nmbs_departures.domain.models.raw_connection import RawSearchResponse
from nmbs_departures.domain.models.result import Result


class ConnectionGateway(Protocol):
    """Port for retrieving raw connections between two stations."""

    async def search_connections(
        self, from_station_id: str, to_station_id: str
    ) -> Result[RawSearchResponse]:
        """Search upcoming connections."""
        ...

    async def fetch_connection_detail(
        self,
        from_station_id: str,
        to_station_id: str,
        identifier: ConnectionIdentifier,
    ) -> Result[RawSearchResponse]:
        """Fetch connections around the identified departure."""
        ...
