"""Protocol for sending messages to the watch."""

from typing import Protocol

from nmbs_departures.domain.models.device_messages import OutboundMessage
from nmbs_departures.domain.models.transmission import (
    DeliveryReceipt,
    TransmissionJob,
    TransmissionResult,
)


class MessageTransmitterProtocol(Protocol):
    """Protocol for single messages and count-then-records jobs."""

    async def transmit(self, job: TransmissionJob) -> TransmissionResult:
        """Run a job to completion or until its count message fails."""
        ...

    async def send_single(self, message: OutboundMessage) -> DeliveryReceipt:
        """Send a one-shot message."""
        ...
