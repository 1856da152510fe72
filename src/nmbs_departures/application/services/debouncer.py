"""Single-slot debouncer on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from nmbs_departures.domain.contracts.request_debouncer import RequestDebouncerProtocol

logger = logging.getLogger(__name__)


class Debouncer(RequestDebouncerProtocol):
    """Coalesces rapid triggers into one delayed action.

    A new ``schedule`` call drops the pending action and restarts the delay.
    Actions whose delay has elapsed run as tasks and are never cancelled by
    later calls.
    """

    def __init__(self, name: str = "debouncer") -> None:
        """Initialize the debouncer.

        Args:
            name: Label used in log messages.
        """
        self.name = name
        self._timer: asyncio.TimerHandle | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule(self, action: Callable[[], Awaitable[None]], delay_ms: int) -> None:
        """Run ``action`` after ``delay_ms`` unless another call supersedes it.

        Must be called from within a running event loop.
        """
        if self._timer is not None:
            self._timer.cancel()
            logger.debug(f"{self.name}: superseded pending action")

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay_ms / 1000, self._fire, action)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.debug(f"{self.name}: cancelled pending action")

    def _fire(self, action: Callable[[], Awaitable[None]]) -> None:
        self._timer = None
        logger.debug(f"{self.name}: executing debounced action")
        task = asyncio.ensure_future(self._run(action))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def _run(self, action: Callable[[], Awaitable[None]]) -> None:
        try:
            await action()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"{self.name}: debounced action failed")

    async def aclose(self) -> None:
        """Drop the pending action and wait for started actions to finish."""
        self.cancel()
        if self._running:
            await asyncio.gather(*self._running, return_exceptions=True)
