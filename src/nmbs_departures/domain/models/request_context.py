"""Request context domain model."""

from dataclasses import dataclass
from enum import Enum


class RequestKind(Enum):
    """Kinds of device requests that are correlated independently."""

    SEARCH = "search"
    DETAIL = "detail"


@dataclass(frozen=True)
class RequestContext:
    """The accepted request of one kind.

    Every outgoing message of a job started for this request carries
    ``request_id`` so the device can drop results of superseded requests.
    """

    request_id: int
    from_station_id: str
    to_station_id: str
