"""Domain layer - protocol models and ports."""

from nmbs_departures.domain.models import (
    ConnectionIdentifier,
    DepartureRecord,
    LegRecord,
    RequestContext,
    ScheduleRule,
    StationCacheEntry,
)
from nmbs_departures.domain.ports import (
    ConnectionGateway,
    DeviceTransport,
    KeyValueStore,
    StationRepository,
)

__all__ = [
    "ConnectionGateway",
    "ConnectionIdentifier",
    "DepartureRecord",
    "DeviceTransport",
    "KeyValueStore",
    "LegRecord",
    "RequestContext",
    "ScheduleRule",
    "StationCacheEntry",
    "StationRepository",
]
