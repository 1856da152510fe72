"""Request correlation and connection identifier bookkeeping."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nmbs_departures.domain.models.protocol_error import ErrorKind
from nmbs_departures.domain.models.request_context import RequestContext, RequestKind
from nmbs_departures.domain.models.result import Err, Ok, Result

if TYPE_CHECKING:
    from nmbs_departures.application.services.companion_storage import CompanionStorage
    from nmbs_departures.domain.models.connection_identifier import ConnectionIdentifier

logger = logging.getLogger(__name__)


class CorrelationStore:
    """Owns the active request of each kind and the departure identifier table.

    Only the event loop thread mutates this object. Jobs capture the
    RequestContext returned by ``begin_request`` and never read the store again,
    so a newer request cannot change the id carried by a running job.
    """

    def __init__(self, storage: CompanionStorage | None = None) -> None:
        """Initialize an empty store.

        Args:
            storage: Optional persistence for the route and identifier table.
        """
        self._storage = storage
        self._counters: dict[RequestKind, int] = {kind: 0 for kind in RequestKind}
        self._active: dict[RequestKind, RequestContext] = {}
        self._identifiers: list[ConnectionIdentifier | None] = []

    def load(self) -> None:
        """Restore the last route and identifier table from storage."""
        if self._storage is None:
            return

        route = self._storage.load_route()
        if route is not None:
            from_id, to_id = route
            self._active[RequestKind.SEARCH] = RequestContext(0, from_id, to_id)
            logger.info(f"Restored session: {from_id} -> {to_id}")

        self._identifiers = self._storage.load_identifiers()
        logger.info(f"Loaded {len(self._identifiers)} connection identifiers")

    def begin_request(
        self,
        kind: RequestKind,
        from_station_id: str,
        to_station_id: str,
        request_id: int | None = None,
    ) -> RequestContext:
        """Make a new request of ``kind`` the active one.

        The watch numbers its own requests; when it supplies ``request_id``
        that id is used verbatim. Otherwise the next local id is issued.
        """
        if request_id is None:
            request_id = self._counters[kind] + 1
        self._counters[kind] = max(self._counters[kind], request_id)

        context = RequestContext(request_id, from_station_id, to_station_id)
        self._active[kind] = context
        logger.debug(f"Active {kind.value} request is now [ID {request_id}]")
        return context

    def active_context(self, kind: RequestKind) -> RequestContext | None:
        return self._active.get(kind)

    def is_active(self, kind: RequestKind, request_id: int) -> bool:
        """Whether ``request_id`` is still the newest request of ``kind``."""
        context = self._active.get(kind)
        return context is not None and context.request_id == request_id

    def clear_identifiers(self) -> None:
        """Forget all identifiers, e.g. when a new search starts."""
        self._identifiers = []
        self._persist_identifiers()

    def replace_identifiers(self, identifiers: list[ConnectionIdentifier]) -> None:
        """Overwrite the whole table with the identifiers of a new search result."""
        self._identifiers = list(identifiers)
        self._persist_identifiers()

    def record_identifier(self, index: int, identifier: ConnectionIdentifier) -> None:
        """Store the identifier of the departure delivered at ``index``."""
        if index >= len(self._identifiers):
            self._identifiers.extend([None] * (index + 1 - len(self._identifiers)))
        self._identifiers[index] = identifier
        self._persist_identifiers()

    def get_identifier(self, index: int) -> Result[ConnectionIdentifier]:
        """Look up the identifier of a delivered departure."""
        identifier = self._identifiers[index] if 0 <= index < len(self._identifiers) else None
        if identifier is None:
            return Err.of(ErrorKind.NOT_FOUND, f"No connection identifier for index {index}")
        return Ok(identifier)

    def _persist_identifiers(self) -> None:
        if self._storage is not None:
            self._storage.save_identifiers(self._identifiers)
