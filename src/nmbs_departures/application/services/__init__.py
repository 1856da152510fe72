"""Application services."""

from nmbs_departures.application.services.companion_service import (
    CompanionService,
    CompanionServices,
    CompanionSettings,
    locate_connection,
    parse_schedule_rules,
)
from nmbs_departures.application.services.companion_storage import CompanionStorage
from nmbs_departures.application.services.correlation_store import CorrelationStore
from nmbs_departures.application.services.debouncer import Debouncer
from nmbs_departures.application.services.record_formatter import RecordFormatter
from nmbs_departures.application.services.sequential_transmitter import SequentialTransmitter
from nmbs_departures.application.services.station_directory import StationDirectory

__all__ = [
    "CompanionService",
    "CompanionServices",
    "CompanionSettings",
    "CompanionStorage",
    "CorrelationStore",
    "Debouncer",
    "RecordFormatter",
    "SequentialTransmitter",
    "StationDirectory",
    "locate_connection",
    "parse_schedule_rules",
]
