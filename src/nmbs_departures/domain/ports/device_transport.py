"""Device transport port."""

from typing import Protocol

from nmbs_departures.domain.models.device_messages import OutboundMessage
from nmbs_departures.domain.models.transmission import DeliveryReceipt


class DeviceTransport(Protocol):
    """Port for the single-outstanding-message channel to the watch."""

    async def send(self, message: OutboundMessage) -> DeliveryReceipt:
        """Send one message and wait for the transport's success or failure report.

        Implementations never raise for delivery problems; they report them in
        the receipt. There is no timeout: a transport that never reports stalls
        the caller.
        """
        ...
