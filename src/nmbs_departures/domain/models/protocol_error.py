"""Protocol error domain model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Failure kinds surfaced by the protocol layer."""

    INVALID_REQUEST = "invalid_request"
    FETCH_FAILED = "fetch_failed"
    NOT_FOUND = "not_found"
    TRANSPORT_SEND_FAILED = "transport_send_failed"


class ProtocolError(BaseModel):
    """Details about a failed operation, including HTTP status code if applicable."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    reason: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind.value}: {self.reason} (status {self.status_code})"
        return f"{self.kind.value}: {self.reason}"
