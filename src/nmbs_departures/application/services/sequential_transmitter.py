"""Sequential count-then-records delivery over a single-outstanding-message transport."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nmbs_departures.domain.contracts.message_transmitter import MessageTransmitterProtocol
from nmbs_departures.domain.models.transmission import (
    DeliveryReceipt,
    TransmissionJob,
    TransmissionResult,
    TransmissionState,
)

if TYPE_CHECKING:
    from nmbs_departures.domain.models.device_messages import OutboundMessage
    from nmbs_departures.domain.ports.device_transport import DeviceTransport

logger = logging.getLogger(__name__)


class SequentialTransmitter(MessageTransmitterProtocol):
    """Delivers jobs one message at a time.

    The count message must be acknowledged before any record is sent. After
    that every record is attempted exactly once, in order, whether or not the
    previous one was delivered, so a job always terminates once the transport
    reports on each send.
    """

    def __init__(self, transport: DeviceTransport) -> None:
        """Initialize with the transport to send through."""
        self._transport = transport

    async def send_single(self, message: OutboundMessage) -> DeliveryReceipt:
        receipt = await self._transport.send(message)
        if not receipt.delivered:
            logger.warning(f"Failed to send {message.message_type.name}: {receipt.error}")
        return receipt

    async def transmit(self, job: TransmissionJob) -> TransmissionResult:
        """Send the job's count message, then each record in order."""
        records = list(job.records)
        if job.limit is not None:
            records = records[: job.limit]
        count = len(records)

        header = job.header(count)
        receipt = await self._transport.send(header)
        if not receipt.delivered:
            logger.warning(
                f"{job.kind.value}: failed to send count {count}, aborting job: {receipt.error}"
            )
            return TransmissionResult(
                job.kind, TransmissionState.ABORTED, count, error=receipt.error
            )

        logger.debug(f"{job.kind.value}: count {count} sent")

        delivered = 0
        failed: list[int] = []
        skipped: list[int] = []
        for index, record in enumerate(records):
            if record is None:
                logger.info(f"{job.kind.value}: record {index} unavailable, skipping")
                skipped.append(index)
                continue

            receipt = await self._transport.send(record)
            if receipt.delivered:
                delivered += 1
            else:
                logger.warning(f"{job.kind.value}: failed to send record {index}: {receipt.error}")
                failed.append(index)

        logger.info(
            f"{job.kind.value}: sent {delivered}/{count} records"
            + (f", {len(failed)} failed" if failed else "")
        )
        return TransmissionResult(
            job.kind,
            TransmissionState.DONE,
            count,
            delivered=delivered,
            failed_indices=tuple(failed),
            skipped_indices=tuple(skipped),
        )
