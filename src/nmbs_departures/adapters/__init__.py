"""Adapters layer - external system integrations."""

from nmbs_departures.adapters.config import AppConfig
from nmbs_departures.adapters.irail_api import (
    IRailConnectionGateway,
    IRailHttpClient,
    IRailStationRepository,
)
from nmbs_departures.adapters.storage import InMemoryStore, JsonFileStore
from nmbs_departures.adapters.transport import WebSocketDeviceTransport

__all__ = [
    "AppConfig",
    "IRailConnectionGateway",
    "IRailHttpClient",
    "IRailStationRepository",
    "InMemoryStore",
    "JsonFileStore",
    "WebSocketDeviceTransport",
]
