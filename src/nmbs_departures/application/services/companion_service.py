"""Companion service: turns watch requests into correlated transmission jobs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from nmbs_departures.application.services import schedule_evaluator
from nmbs_departures.application.services.record_formatter import truncate
from nmbs_departures.domain.constants import (
    CONFIG_STATION_ID_MAX_LENGTH,
    CONFIG_STATION_NAME_MAX_LENGTH,
    DEBOUNCE_DELAY_MS,
    LEGACY_STATION_IDS,
    MAX_DEPARTURES,
    MAX_FAVORITE_STATIONS,
    SUPPORTED_LANGUAGES,
)
from nmbs_departures.domain.models.connection_identifier import ConnectionIdentifier
from nmbs_departures.domain.models.device_messages import (
    ActiveRouteMessage,
    DataRequest,
    DepartureCount,
    DepartureMessage,
    DetailCount,
    DetailLegMessage,
    DetailRequest,
    RequestAck,
    StationCount,
    StationMessage,
    parse_inbound,
)
from nmbs_departures.domain.models.protocol_error import ErrorKind
from nmbs_departures.domain.models.request_context import RequestContext, RequestKind
from nmbs_departures.domain.models.result import Err, Ok, Result
from nmbs_departures.domain.models.schedule_rule import ActiveRoute, ScheduleRule
from nmbs_departures.domain.models.transmission import (
    DeliveryReceipt,
    JobKind,
    TransmissionJob,
    TransmissionResult,
)

if TYPE_CHECKING:
    from nmbs_departures.application.services.companion_storage import CompanionStorage
    from nmbs_departures.application.services.correlation_store import CorrelationStore
    from nmbs_departures.application.services.station_directory import StationDirectory
    from nmbs_departures.domain.contracts.message_transmitter import MessageTransmitterProtocol
    from nmbs_departures.domain.contracts.record_formatter import RecordFormatterProtocol
    from nmbs_departures.domain.contracts.request_debouncer import RequestDebouncerProtocol
    from nmbs_departures.domain.models.configuration_update import ConfigurationUpdate
    from nmbs_departures.domain.models.device_messages import OutboundMessage
    from nmbs_departures.domain.models.raw_connection import RawConnection, RawSearchResponse
    from nmbs_departures.domain.ports.connection_gateway import ConnectionGateway

logger = logging.getLogger(__name__)


def locate_connection(
    response: RawSearchResponse, identifier: ConnectionIdentifier
) -> Result[RawConnection]:
    """Find the connection whose first vehicle and departure time match exactly."""
    for connection in response.connection:
        if identifier.matches(connection.departure.vehicle, connection.departure.time):
            return Ok(connection)
    return Err.of(
        ErrorKind.NOT_FOUND,
        f"Connection {identifier.vehicle_ref} at {identifier.departure_epoch_seconds} "
        "not found in fresh data",
    )


def parse_schedule_rules(raw_rules: list[dict[str, Any]]) -> list[ScheduleRule]:
    """Validate rules one by one, dropping the invalid ones."""
    rules: list[ScheduleRule] = []
    for raw in raw_rules:
        try:
            rules.append(ScheduleRule.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Dropping invalid schedule rule {raw.get('id', '?')}: {e}")
    return rules


@dataclass(frozen=True)
class CompanionServices:
    """Collaborators of the companion service."""

    gateway: ConnectionGateway
    transmitter: MessageTransmitterProtocol
    formatter: RecordFormatterProtocol
    correlation: CorrelationStore
    storage: CompanionStorage
    stations: StationDirectory
    debouncer: RequestDebouncerProtocol


@dataclass(frozen=True)
class CompanionSettings:
    """Tunables of the companion service."""

    debounce_delay_ms: int = DEBOUNCE_DELAY_MS
    timezone: str = "Europe/Brussels"
    schedule_evaluation_interval_seconds: int = 0
    clock: Callable[[ZoneInfo], datetime] | None = field(default=None, compare=False)


class CompanionService:
    """Handles watch requests and configuration changes.

    Search requests are acknowledged immediately and debounced; detail
    requests run at once. Each job captures the request context that was
    active when it was accepted and tags all of its messages with that id.
    """

    def __init__(
        self, services: CompanionServices, settings: CompanionSettings | None = None
    ) -> None:
        """Initialize the service.

        Args:
            services: Gateway, transmitter and state collaborators.
            settings: Timing and timezone settings.
        """
        self.services = services
        self.settings = settings or CompanionSettings()
        self._timezone = ZoneInfo(self.settings.timezone)
        self._last_route: ActiveRoute | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._evaluation_task: asyncio.Task[None] | None = None

    def now(self) -> datetime:
        """Current wall-clock time in the configured timezone."""
        if self.settings.clock is not None:
            return self.settings.clock(self._timezone)
        return datetime.now(self._timezone)

    # Inbound messages

    async def handle_inbound(self, payload: Mapping[str, Any]) -> None:
        """Dispatch one payload received from the watch."""
        try:
            message = parse_inbound(payload)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed message from watch: {e}")
            return

        if isinstance(message, DataRequest):
            await self.handle_data_request(message)
        elif isinstance(message, DetailRequest):
            await self.handle_detail_request(message)
        else:
            logger.debug(f"Ignoring unhandled message type {payload.get('MESSAGE_TYPE')}")

    async def handle_data_request(self, request: DataRequest) -> RequestContext:
        """Accept a search request, debounce the fetch and acknowledge the request.

        The debounce delay starts when the request arrives, not when the
        acknowledgement is confirmed.
        """
        if request.from_station_id and request.to_station_id:
            from_id, to_id = request.from_station_id, request.to_station_id
            source = "by ID"
        else:
            from_id = LEGACY_STATION_IDS.get(request.from_station_name or "", "")
            to_id = LEGACY_STATION_IDS.get(request.to_station_name or "", "")
            source = f"by name: {request.from_station_name} -> {request.to_station_name}"

        context = self.services.correlation.begin_request(
            RequestKind.SEARCH, from_id, to_id, request.request_id
        )
        stations = self.services.stations
        logger.info(
            f"Data requested [ID {context.request_id}] ({source}): "
            f"{stations.name_for(from_id)} -> {stations.name_for(to_id)}"
        )
        self.services.storage.save_route(from_id, to_id)

        async def run() -> None:
            await self.run_search(context)

        self.services.debouncer.schedule(run, self.settings.debounce_delay_ms)

        receipt = await self.services.transmitter.send_single(RequestAck(context.request_id))
        if receipt.delivered:
            logger.info(f"Request acknowledged [ID {context.request_id}]")
        return context

    async def run_search(self, context: RequestContext) -> TransmissionResult | None:
        """Fetch connections for ``context`` and deliver them.

        Failures are answered with an empty result so the watch stops waiting.
        Results of a search that was superseded while fetching are still
        delivered under their own id but leave the identifier table alone.
        """
        logger.info(f"Executing search [ID {context.request_id}]")
        correlation = self.services.correlation
        if correlation.is_active(RequestKind.SEARCH, context.request_id):
            correlation.clear_identifiers()

        result = await self.services.gateway.search_connections(
            context.from_station_id, context.to_station_id
        )
        if isinstance(result, Err):
            logger.warning(f"Search [ID {context.request_id}] failed: {result.error}")
            await self.services.transmitter.send_single(DepartureCount(0, context.request_id))
            return None

        connections = result.value.connection[:MAX_DEPARTURES]
        logger.info(f"Found {len(connections)} connections [ID {context.request_id}]")

        if correlation.is_active(RequestKind.SEARCH, context.request_id):
            correlation.replace_identifiers(
                [
                    ConnectionIdentifier(
                        vehicle_ref=connection.departure.vehicle or "",
                        departure_epoch_seconds=connection.departure.time or 0,
                    )
                    for connection in connections
                ]
            )
        else:
            logger.info(
                f"Search [ID {context.request_id}] was superseded, keeping current identifiers"
            )

        records: list[OutboundMessage | None] = [
            DepartureMessage(
                self.services.formatter.departure_record(connection, index),
                context.request_id,
            )
            for index, connection in enumerate(connections)
        ]
        job = TransmissionJob(
            kind=JobKind.SEARCH_RESULTS,
            header=lambda count: DepartureCount(count, context.request_id),
            records=records,
            limit=MAX_DEPARTURES,
        )
        return await self.services.transmitter.transmit(job)

    async def handle_detail_request(self, request: DetailRequest) -> TransmissionResult | None:
        """Fetch and deliver the legs of a previously delivered departure.

        Nothing is sent when the departure cannot be re-identified; the watch
        has no message for an empty detail.
        """
        search = self.services.correlation.active_context(RequestKind.SEARCH)
        from_id = search.from_station_id if search else ""
        to_id = search.to_station_id if search else ""
        context = self.services.correlation.begin_request(
            RequestKind.DETAIL, from_id, to_id, request.request_id
        )
        logger.info(
            f"Details requested [ID {context.request_id}] for departure {request.departure_index}"
        )

        lookup = self.services.correlation.get_identifier(request.departure_index)
        if isinstance(lookup, Err):
            logger.warning(f"Detail [ID {context.request_id}]: {lookup.error}")
            return None
        identifier = lookup.value

        fetched = await self.services.gateway.fetch_connection_detail(
            context.from_station_id, context.to_station_id, identifier
        )
        if isinstance(fetched, Err):
            logger.warning(f"Detail [ID {context.request_id}] fetch failed: {fetched.error}")
            return None

        located = locate_connection(fetched.value, identifier)
        if isinstance(located, Err):
            logger.warning(f"Detail [ID {context.request_id}]: {located.error}")
            return None

        legs = self.services.formatter.leg_records(located.value)
        job = TransmissionJob(
            kind=JobKind.DETAIL_RESULTS,
            header=lambda count: DetailCount(request.departure_index, count, context.request_id),
            records=[
                DetailLegMessage(leg_index, leg, context.request_id)
                for leg_index, leg in enumerate(legs)
            ],
        )
        return await self.services.transmitter.transmit(job)

    # Favorites and active route

    async def send_favorites(self, station_ids: list[str]) -> TransmissionResult:
        """Send the favorite stations; favorites missing from the cache are skipped."""
        logger.info(f"Sending {len(station_ids)} stations to watch")
        records: list[OutboundMessage | None] = []
        for index, station_id in enumerate(station_ids[:MAX_FAVORITE_STATIONS]):
            station = self.services.stations.find(station_id)
            if station is None:
                logger.warning(f"Station not found in cache: {station_id}")
                records.append(None)
                continue
            records.append(
                StationMessage(
                    index=index,
                    name=truncate(station.name, CONFIG_STATION_NAME_MAX_LENGTH),
                    station_id=truncate(station.id, CONFIG_STATION_ID_MAX_LENGTH),
                )
            )

        job = TransmissionJob(
            kind=JobKind.FAVORITES,
            header=StationCount,
            records=records,
            limit=MAX_FAVORITE_STATIONS,
        )
        return await self.services.transmitter.transmit(job)

    async def set_active_route(
        self, favorites: list[str], route: ActiveRoute
    ) -> DeliveryReceipt | None:
        """Point the watch at the favorites making up ``route``."""
        try:
            from_index = favorites.index(route.from_station_id)
            to_index = favorites.index(route.to_station_id)
        except ValueError:
            logger.info("Active route stations not in favorites")
            return None

        logger.info(f"Setting active route: index {from_index} -> {to_index}")
        return await self.services.transmitter.send_single(
            ActiveRouteMessage(from_index, to_index)
        )

    async def evaluate_schedules(self, force: bool = False) -> ActiveRoute | None:
        """Evaluate stored schedules and send the active route.

        Without ``force`` the route is only sent when it differs from the one
        sent last.
        """
        rules = self.services.storage.load_schedules()
        if not rules:
            logger.debug("No smart schedules configured")
            return None

        now = self.now()
        route = schedule_evaluator.evaluate(rules, now)
        logger.debug(
            f"Evaluated {len(rules)} schedules for day={schedule_evaluator.weekday_number(now)}, "
            f"time={now:%H:%M}: {route}"
        )
        if route is None or (not force and route == self._last_route):
            return route

        favorites = self.services.storage.load_favorites() or []
        receipt = await self.set_active_route(favorites, route)
        if receipt is not None and receipt.delivered:
            self._last_route = route
        return route

    async def apply_configuration(self, update: ConfigurationUpdate) -> None:
        """Persist settings from the configuration page and push them to the watch."""
        if update.language:
            if update.language in SUPPORTED_LANGUAGES:
                self.services.storage.save_language(update.language)
            else:
                logger.warning(f"Ignoring unsupported language {update.language!r}")

        if update.favorite_stations:
            favorites = update.favorite_stations[:MAX_FAVORITE_STATIONS]
            if len(update.favorite_stations) > MAX_FAVORITE_STATIONS:
                logger.warning(
                    f"Only the first {MAX_FAVORITE_STATIONS} of "
                    f"{len(update.favorite_stations)} favorite stations are kept"
                )
            self.services.storage.save_favorites(favorites)
            await self.send_favorites(favorites)

        if update.smart_schedules is not None:
            rules = parse_schedule_rules(update.smart_schedules)
            self.services.storage.save_schedules(rules)
            await self.evaluate_schedules(force=True)

    # Lifecycle

    async def start(self) -> None:
        """Restore persisted state and push favorites and the active route."""
        self.services.stations.load_cached()
        self._spawn(self.services.stations.refresh())
        self.services.correlation.load()

        favorites = self.services.storage.load_favorites()
        if favorites:
            logger.info(f"Loading saved configuration with {len(favorites)} stations")
            await self.send_favorites(favorites)
            route = await self.evaluate_schedules(force=True)
            if route is None:
                logger.info("No active schedule, watch will use its default route")
        else:
            logger.info("No saved configuration, watch will use defaults")

        interval = self.settings.schedule_evaluation_interval_seconds
        if interval > 0 and self._evaluation_task is None:
            self._evaluation_task = asyncio.create_task(self._evaluation_loop(interval))
            logger.info(f"Started schedule evaluation every {interval}s")

    async def stop(self) -> None:
        """Cancel background work and wait for running jobs."""
        if self._evaluation_task is not None:
            self._evaluation_task.cancel()
            try:
                await self._evaluation_task
            except asyncio.CancelledError:
                logger.info("Schedule evaluation cancelled")
            self._evaluation_task = None

        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        await self.services.debouncer.aclose()

    async def _evaluation_loop(self, interval: int) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.evaluate_schedules()
            except Exception:
                logger.exception("Schedule evaluation failed")

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
