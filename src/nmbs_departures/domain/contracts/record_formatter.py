"""Protocol for turning raw connections into device records."""

from typing import Protocol

from nmbs_departures.domain.models.departure_record import DepartureRecord
from nmbs_departures.domain.models.leg_record import LegRecord
from nmbs_departures.domain.models.raw_connection import RawConnection


class RecordFormatterProtocol(Protocol):
    """Protocol for formatting connections."""

    def departure_record(self, connection: RawConnection, index: int) -> DepartureRecord:
        """Project a connection onto a departure record."""
        ...

    def leg_records(self, connection: RawConnection) -> list[LegRecord]:
        """Split a connection into its legs."""
        ...
