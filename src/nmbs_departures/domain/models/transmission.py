"""Models describing sequential transmission jobs."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .device_messages import OutboundMessage
from .protocol_error import ErrorKind, ProtocolError


class JobKind(Enum):
    """Independent kinds of multi-message jobs."""

    SEARCH_RESULTS = "search_results"
    DETAIL_RESULTS = "detail_results"
    FAVORITES = "favorites"


class TransmissionState(Enum):
    """Terminal state of a transmission job."""

    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class DeliveryReceipt:
    """Outcome of a single send as reported by the transport."""

    delivered: bool
    reason: str | None = None

    @property
    def error(self) -> ProtocolError | None:
        """The send failure as a protocol error, or None when delivered."""
        if self.delivered:
            return None
        return ProtocolError(
            kind=ErrorKind.TRANSPORT_SEND_FAILED, reason=self.reason or "Send failed"
        )


@dataclass(frozen=True)
class TransmissionJob:
    """A count message followed by ordered records.

    ``header`` receives the number of records that will be delivered after
    ``limit`` has been applied. A ``None`` record marks a slot that cannot be
    produced; it is skipped without sending.
    """

    kind: JobKind
    header: Callable[[int], OutboundMessage]
    records: Sequence[OutboundMessage | None]
    limit: int | None = None


@dataclass(frozen=True)
class TransmissionResult:
    """Summary of a finished (or aborted) job.

    ``error`` is set when the count message failed and the job was aborted.
    """

    kind: JobKind
    state: TransmissionState
    count: int
    delivered: int = 0
    failed_indices: tuple[int, ...] = field(default_factory=tuple)
    skipped_indices: tuple[int, ...] = field(default_factory=tuple)
    error: ProtocolError | None = None

    @property
    def completed(self) -> bool:
        """True when every record was attempted."""
        return self.state is TransmissionState.DONE
