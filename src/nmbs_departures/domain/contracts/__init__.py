"""Contracts (protocols) for in-process collaborators."""

from nmbs_departures.domain.contracts.message_transmitter import MessageTransmitterProtocol
from nmbs_departures.domain.contracts.record_formatter import RecordFormatterProtocol
from nmbs_departures.domain.contracts.request_debouncer import RequestDebouncerProtocol

__all__ = [
    "MessageTransmitterProtocol",
    "RecordFormatterProtocol",
    "RequestDebouncerProtocol",
]
