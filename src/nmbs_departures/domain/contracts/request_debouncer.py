"""Protocol for debouncing requests."""

from collections.abc import Awaitable, Callable
from typing import Protocol


class RequestDebouncerProtocol(Protocol):
    """Protocol for a single-slot delayed-execution gate."""

    def schedule(self, action: Callable[[], Awaitable[None]], delay_ms: int) -> None:
        """Replace any pending action and restart the delay."""
        ...

    def cancel(self) -> None:
        """Drop the pending action, if any."""
        ...

    @property
    def pending(self) -> bool:
        """Whether an action is waiting for its delay to elapse."""
        ...

    async def aclose(self) -> None:
        """Drop the pending action and wait for running ones."""
        ...
