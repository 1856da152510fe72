"""Messages exchanged with the watch.

Payloads are flat dictionaries of integer and string fields keyed by the
watch's message keys. Booleans travel as 0/1.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, Protocol

from .departure_record import DepartureRecord
from .leg_record import LegRecord

PayloadValue = int | str
Payload = dict[str, PayloadValue]


class MessageType(IntEnum):
    """Values of the ``MESSAGE_TYPE`` field, shared with the watch firmware."""

    REQUEST_DATA = 1
    SEND_DEPARTURE = 2
    SEND_COUNT = 3
    REQUEST_DETAILS = 4
    SEND_DETAIL = 5
    SEND_STATION_COUNT = 6
    SEND_STATION = 7
    SET_ACTIVE_ROUTE = 8
    REQUEST_ACK = 9


class OutboundMessage(Protocol):
    """A message the companion sends to the watch."""

    message_type: ClassVar[MessageType]

    def to_payload(self) -> Payload:
        """Flatten into transport fields."""
        ...


def _flag(value: bool) -> int:
    return 1 if value else 0


@dataclass(frozen=True)
class RequestAck:
    """Tells the watch a search request was received and is being fetched."""

    message_type: ClassVar[MessageType] = MessageType.REQUEST_ACK

    request_id: int

    def to_payload(self) -> Payload:
        return {"MESSAGE_TYPE": int(self.message_type), "REQUEST_ID": self.request_id}


@dataclass(frozen=True)
class DepartureCount:
    """Header of a search result job."""

    message_type: ClassVar[MessageType] = MessageType.SEND_COUNT

    count: int
    request_id: int

    def to_payload(self) -> Payload:
        return {
            "MESSAGE_TYPE": int(self.message_type),
            "DATA_COUNT": self.count,
            "REQUEST_ID": self.request_id,
        }


@dataclass(frozen=True)
class DepartureMessage:
    """One departure of a search result job."""

    message_type: ClassVar[MessageType] = MessageType.SEND_DEPARTURE

    record: DepartureRecord
    request_id: int

    def to_payload(self) -> Payload:
        record = self.record
        return {
            "MESSAGE_TYPE": int(self.message_type),
            "DEPARTURE_INDEX": record.index,
            "DESTINATION": record.destination,
            "DEPART_TIME": record.depart_time,
            "DEPART_TIMESTAMP": record.depart_timestamp,
            "ARRIVE_TIME": record.arrive_time,
            "PLATFORM": record.platform,
            "TRAIN_TYPE": record.train_type,
            "DURATION": record.duration,
            "DEPART_DELAY": record.depart_delay,
            "ARRIVE_DELAY": record.arrive_delay,
            "IS_DIRECT": _flag(record.is_direct),
            "PLATFORM_CHANGED": _flag(record.platform_changed),
            "REQUEST_ID": self.request_id,
        }


@dataclass(frozen=True)
class DetailCount:
    """Header of a detail job (count form of SEND_DETAIL)."""

    message_type: ClassVar[MessageType] = MessageType.SEND_DETAIL

    departure_index: int
    leg_count: int
    request_id: int

    def to_payload(self) -> Payload:
        return {
            "MESSAGE_TYPE": int(self.message_type),
            "DEPARTURE_INDEX": self.departure_index,
            "LEG_COUNT": self.leg_count,
            "REQUEST_ID": self.request_id,
        }


@dataclass(frozen=True)
class DetailLegMessage:
    """One leg of a detail job (leg form of SEND_DETAIL)."""

    message_type: ClassVar[MessageType] = MessageType.SEND_DETAIL

    leg_index: int
    leg: LegRecord
    request_id: int

    def to_payload(self) -> Payload:
        leg = self.leg
        return {
            "MESSAGE_TYPE": int(self.message_type),
            "LEG_INDEX": self.leg_index,
            "LEG_DEPART_STATION": leg.depart_station,
            "LEG_ARRIVE_STATION": leg.arrive_station,
            "LEG_DEPART_TIME": leg.depart_time,
            "LEG_ARRIVE_TIME": leg.arrive_time,
            "LEG_DEPART_PLATFORM": leg.depart_platform,
            "LEG_ARRIVE_PLATFORM": leg.arrive_platform,
            "LEG_DEPART_DELAY": leg.depart_delay,
            "LEG_ARRIVE_DELAY": leg.arrive_delay,
            "LEG_VEHICLE": leg.vehicle,
            "LEG_DIRECTION": leg.direction,
            "LEG_STOP_COUNT": leg.stop_count,
            "LEG_DEPART_PLATFORM_CHANGED": _flag(leg.depart_platform_changed),
            "LEG_ARRIVE_PLATFORM_CHANGED": _flag(leg.arrive_platform_changed),
            "REQUEST_ID": self.request_id,
        }


@dataclass(frozen=True)
class StationCount:
    """Header of a favorites job."""

    message_type: ClassVar[MessageType] = MessageType.SEND_STATION_COUNT

    count: int

    def to_payload(self) -> Payload:
        return {"MESSAGE_TYPE": int(self.message_type), "CONFIG_STATION_COUNT": self.count}


@dataclass(frozen=True)
class StationMessage:
    """One favorite station, by its position in the favorites list."""

    message_type: ClassVar[MessageType] = MessageType.SEND_STATION

    index: int
    name: str
    station_id: str

    def to_payload(self) -> Payload:
        return {
            "MESSAGE_TYPE": int(self.message_type),
            "CONFIG_STATION_INDEX": self.index,
            "CONFIG_STATION_NAME": self.name,
            "CONFIG_STATION_IRAIL_ID": self.station_id,
        }


@dataclass(frozen=True)
class ActiveRouteMessage:
    """Selects the from/to favorites the watch should show."""

    message_type: ClassVar[MessageType] = MessageType.SET_ACTIVE_ROUTE

    from_index: int
    to_index: int

    def to_payload(self) -> Payload:
        return {
            "MESSAGE_TYPE": int(self.message_type),
            "CONFIG_FROM_INDEX": self.from_index,
            "CONFIG_TO_INDEX": self.to_index,
        }


@dataclass(frozen=True)
class DataRequest:
    """REQUEST_DATA from the watch.

    Current firmware sends iRail ids; older builds send station names that
    must be mapped through the legacy name table.
    """

    request_id: int | None
    from_station_id: str | None = None
    to_station_id: str | None = None
    from_station_name: str | None = None
    to_station_name: str | None = None


@dataclass(frozen=True)
class DetailRequest:
    """REQUEST_DETAILS from the watch."""

    request_id: int | None
    departure_index: int


InboundMessage = DataRequest | DetailRequest


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return str(value) if value else None


def parse_inbound(payload: Mapping[str, Any]) -> InboundMessage | None:
    """Parse a watch payload; returns None for payloads the companion does not handle.

    A missing ``REQUEST_ID`` is kept as None so the correlation store issues one.

    Raises:
        ValueError: If a handled message carries non-integer numeric fields
            or lacks its departure index.
    """
    raw_type = payload.get("MESSAGE_TYPE")
    if raw_type is None:
        return None

    message_type = int(raw_type)
    raw_id = payload.get("REQUEST_ID")
    request_id = None if raw_id is None or raw_id == "" else int(raw_id)

    if message_type == MessageType.REQUEST_DATA:
        return DataRequest(
            request_id=request_id,
            from_station_id=_optional_str(payload, "FROM_STATION_ID"),
            to_station_id=_optional_str(payload, "TO_STATION_ID"),
            from_station_name=_optional_str(payload, "FROM_STATION"),
            to_station_name=_optional_str(payload, "TO_STATION"),
        )

    if message_type == MessageType.REQUEST_DETAILS:
        departure_index = payload.get("DEPARTURE_INDEX")
        if departure_index is None:
            raise ValueError("REQUEST_DETAILS without DEPARTURE_INDEX")
        return DetailRequest(request_id=request_id, departure_index=int(departure_index))

    return None
