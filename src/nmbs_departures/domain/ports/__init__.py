"""Ports (interfaces) for the ports-and-adapters architecture."""

from nmbs_departures.domain.ports.connection_gateway import ConnectionGateway
from nmbs_departures.domain.ports.device_transport import DeviceTransport
from nmbs_departures.domain.ports.key_value_store import KeyValueStore
from nmbs_departures.domain.ports.station_repository import StationRepository

__all__ = [
    "ConnectionGateway",
    "DeviceTransport",
    "KeyValueStore",
    "StationRepository",
]
