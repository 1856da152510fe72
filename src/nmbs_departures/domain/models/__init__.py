"""Domain models for the NMBS departures companion."""

from nmbs_departures.domain.models.configuration_update import ConfigurationUpdate
from nmbs_departures.domain.models.connection_identifier import ConnectionIdentifier
from nmbs_departures.domain.models.departure_record import DepartureRecord
from nmbs_departures.domain.models.device_messages import (
    ActiveRouteMessage,
    DataRequest,
    DepartureCount,
    DepartureMessage,
    DetailCount,
    DetailLegMessage,
    DetailRequest,
    InboundMessage,
    MessageType,
    OutboundMessage,
    Payload,
    RequestAck,
    StationCount,
    StationMessage,
    parse_inbound,
)
from nmbs_departures.domain.models.leg_record import LegRecord
from nmbs_departures.domain.models.protocol_error import ErrorKind, ProtocolError
from nmbs_departures.domain.models.raw_connection import (
    RawConnection,
    RawSearchResponse,
    RawStationListResponse,
    RawStop,
    RawVia,
)
from nmbs_departures.domain.models.request_context import RequestContext, RequestKind
from nmbs_departures.domain.models.result import Err, Ok, Result
from nmbs_departures.domain.models.schedule_rule import ActiveRoute, ScheduleRule
from nmbs_departures.domain.models.station import StationCacheEntry
from nmbs_departures.domain.models.transmission import (
    DeliveryReceipt,
    JobKind,
    TransmissionJob,
    TransmissionResult,
    TransmissionState,
)

__all__ = [
    "ActiveRoute",
    "ActiveRouteMessage",
    "ConfigurationUpdate",
    "ConnectionIdentifier",
    "DataRequest",
    "DeliveryReceipt",
    "DepartureCount",
    "DepartureMessage",
    "DepartureRecord",
    "DetailCount",
    "DetailLegMessage",
    "DetailRequest",
    "Err",
    "ErrorKind",
    "InboundMessage",
    "JobKind",
    "LegRecord",
    "MessageType",
    "Ok",
    "OutboundMessage",
    "Payload",
    "ProtocolError",
    "RawConnection",
    "RawSearchResponse",
    "RawStationListResponse",
    "RawStop",
    "RawVia",
    "RequestAck",
    "RequestContext",
    "RequestKind",
    "Result",
    "ScheduleRule",
    "StationCacheEntry",
    "StationCount",
    "StationMessage",
    "TransmissionJob",
    "TransmissionResult",
    "TransmissionState",
    "parse_inbound",
]
