"""Formatting of raw iRail connections into device records."""

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from nmbs_departures.domain.constants import (
    CLOCK_MAX_LENGTH,
    DESTINATION_MAX_LENGTH,
    DIRECTION_MAX_LENGTH,
    DURATION_MAX_LENGTH,
    PLATFORM_MAX_LENGTH,
    STATION_NAME_MAX_LENGTH,
    TRAIN_TYPE_MAX_LENGTH,
    VEHICLE_MAX_LENGTH,
)
from nmbs_departures.domain.contracts.record_formatter import RecordFormatterProtocol
from nmbs_departures.domain.models.departure_record import DepartureRecord
from nmbs_departures.domain.models.leg_record import LegRecord
from nmbs_departures.domain.models.raw_connection import RawConnection, RawStop, RawVia

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
UNKNOWN_PLATFORM = "?"
DEFAULT_TRAIN_TYPE = "IC"

# iRail platforminfo.normal: "1" = scheduled platform, "0" = changed
PLATFORM_CHANGED_SENTINEL = "0"


def truncate(value: str, max_length: int) -> str:
    """Cut a string to the device buffer size. Never fails."""
    return value[:max_length]


def format_duration(total_seconds: int) -> str:
    """Format a duration as compact hours and minutes (e.g. '1h1m', '1h', '45m')."""
    total_minutes = max(total_seconds, 0) // 60
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0 and minutes > 0:
        return f"{hours}h{minutes}m"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


def delay_minutes(delay_seconds: int) -> int:
    """Convert an iRail delay in seconds to whole minutes."""
    return delay_seconds // 60


def is_platform_changed(stop: RawStop) -> bool:
    """True exactly when iRail flags the platform as not the scheduled one."""
    if stop.platforminfo is None:
        return False
    return stop.platforminfo.normal == PLATFORM_CHANGED_SENTINEL


def is_direct(connection: RawConnection) -> bool:
    """True when the connection has no transfers."""
    return connection.vias is None or connection.vias.number == 0


def resolve_direction(stop: RawStop, fallback: RawStop | None = None) -> str:
    """Direction name, else the fallback stop's station name, else 'Unknown'."""
    if stop.direction is not None and stop.direction.name:
        return stop.direction.name
    if fallback is not None and fallback.stationinfo is not None and fallback.stationinfo.name:
        return fallback.stationinfo.name
    return UNKNOWN


def station_name(stop: RawStop, via: RawVia | None = None) -> str:
    """Station name of a stop, falling back to the enclosing via's station."""
    if stop.stationinfo is not None and stop.stationinfo.name:
        return stop.stationinfo.name
    if via is not None:
        if via.stationinfo is not None and via.stationinfo.name:
            return via.stationinfo.name
        if via.station:
            return via.station
    return stop.station or UNKNOWN


def vehicle_name(stop: RawStop) -> str:
    """Short vehicle name such as 'IC 2117'."""
    if stop.vehicleinfo is not None and stop.vehicleinfo.shortname:
        return stop.vehicleinfo.shortname
    return UNKNOWN


def train_type(stop: RawStop) -> str:
    """Train category such as 'IC', 'S' or 'L'."""
    if stop.vehicleinfo is not None and stop.vehicleinfo.type:
        return stop.vehicleinfo.type
    return DEFAULT_TRAIN_TYPE


def stop_count(stop: RawStop) -> int:
    """Number of intermediate stops of the vehicle departing here."""
    return stop.stops.number if stop.stops is not None else 0


class RecordFormatter(RecordFormatterProtocol):
    """Builds truncated, display-ready records in the configured timezone."""

    def __init__(self, timezone: str = "Europe/Brussels") -> None:
        """Initialize the formatter.

        Args:
            timezone: IANA timezone used to render clock times.
        """
        self._timezone = ZoneInfo(timezone)

    def format_clock(self, epoch_seconds: int | None) -> str:
        """Format a Unix timestamp as HH:MM."""
        if epoch_seconds is None:
            return "--:--"
        moment = datetime.fromtimestamp(epoch_seconds, tz=UTC).astimezone(self._timezone)
        return moment.strftime("%H:%M")

    def departure_record(self, connection: RawConnection, index: int) -> DepartureRecord:
        """Project a connection onto the record shown in the departure list."""
        departure = connection.departure
        arrival = connection.arrival
        return DepartureRecord(
            index=index,
            destination=truncate(resolve_direction(departure, arrival), DESTINATION_MAX_LENGTH),
            depart_time=self.format_clock(departure.time),
            depart_timestamp=departure.time or 0,
            arrive_time=self.format_clock(arrival.time),
            platform=truncate(departure.platform or UNKNOWN_PLATFORM, PLATFORM_MAX_LENGTH),
            train_type=truncate(train_type(departure), TRAIN_TYPE_MAX_LENGTH),
            duration=truncate(format_duration(connection.duration), DURATION_MAX_LENGTH),
            depart_delay=delay_minutes(departure.delay),
            arrive_delay=delay_minutes(arrival.delay),
            is_direct=is_direct(connection),
            platform_changed=is_platform_changed(departure),
        )

    def _leg(
        self,
        start: RawStop,
        end: RawStop,
        start_via: RawVia | None = None,
        end_via: RawVia | None = None,
    ) -> LegRecord:
        return LegRecord(
            depart_station=truncate(station_name(start, start_via), STATION_NAME_MAX_LENGTH),
            arrive_station=truncate(station_name(end, end_via), STATION_NAME_MAX_LENGTH),
            depart_time=truncate(self.format_clock(start.time), CLOCK_MAX_LENGTH),
            arrive_time=truncate(self.format_clock(end.time), CLOCK_MAX_LENGTH),
            depart_platform=truncate(start.platform or UNKNOWN_PLATFORM, PLATFORM_MAX_LENGTH),
            arrive_platform=truncate(end.platform or UNKNOWN_PLATFORM, PLATFORM_MAX_LENGTH),
            depart_delay=delay_minutes(start.delay),
            arrive_delay=delay_minutes(end.delay),
            vehicle=truncate(vehicle_name(start), VEHICLE_MAX_LENGTH),
            direction=truncate(resolve_direction(start), DIRECTION_MAX_LENGTH),
            stop_count=stop_count(start),
            depart_platform_changed=is_platform_changed(start),
            arrive_platform_changed=is_platform_changed(end),
        )

    def leg_records(self, connection: RawConnection) -> list[LegRecord]:
        """Split a connection into legs.

        Leg 0 runs from the departure to the first transfer's arrival; each
        following leg runs from a transfer's departure to the next transfer's
        arrival, or to the final arrival for the last transfer. The result
        always holds one leg more than there are transfers.
        """
        vias = connection.vias.via if connection.vias is not None else []
        if is_direct(connection) or not vias:
            return [self._leg(connection.departure, connection.arrival)]

        legs = [self._leg(connection.departure, vias[0].arrival, end_via=vias[0])]
        for position, via in enumerate(vias):
            if position + 1 < len(vias):
                next_via = vias[position + 1]
                legs.append(self._leg(via.departure, next_via.arrival, via, next_via))
            else:
                legs.append(self._leg(via.departure, connection.arrival, start_via=via))

        logger.debug(f"Built {len(legs)} legs for connection {connection.id}")
        return legs
