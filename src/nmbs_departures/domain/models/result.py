"""Discriminated result returned by gateway and correlation operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .protocol_error import ErrorKind, ProtocolError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a protocol error."""

    error: ProtocolError

    @classmethod
    def of(cls, kind: ErrorKind, reason: str, status_code: int | None = None) -> "Err":
        """Build an error result without constructing the ProtocolError by hand."""
        return cls(ProtocolError(kind=kind, reason=reason, status_code=status_code))


Result = Union[Ok[T], Err]
