"""Typed persistence of companion state on top of a key/value store."""

import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import TypeAdapter, ValidationError

from nmbs_departures.domain.models.connection_identifier import ConnectionIdentifier
from nmbs_departures.domain.models.schedule_rule import ScheduleRule
from nmbs_departures.domain.models.station import StationCacheEntry

if TYPE_CHECKING:
    from nmbs_departures.domain.ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

FROM_STATION_KEY = "nmbs_from_station"
TO_STATION_KEY = "nmbs_to_station"
CONNECTIONS_KEY = "nmbs_connections"
STATION_CACHE_KEY = "nmbs_station_cache"
FAVORITE_STATIONS_KEY = "nmbs_favorite_stations"
SMART_SCHEDULES_KEY = "nmbs_smart_schedules"
LANGUAGE_KEY = "nmbs_language"

_identifiers_adapter = TypeAdapter(list[ConnectionIdentifier | None])
_stations_adapter = TypeAdapter(list[StationCacheEntry])
_favorites_adapter = TypeAdapter(list[str])
_schedules_adapter = TypeAdapter(list[ScheduleRule])


class CompanionStorage:
    """Reads and writes companion state as JSON strings.

    Unreadable values are logged and treated as absent, so a corrupted entry
    never prevents startup.
    """

    def __init__(self, store: "KeyValueStore") -> None:
        """Initialize with the key/value store to persist into."""
        self._store = store

    def _load(self, key: str, adapter: TypeAdapter[T]) -> T | None:
        raw = self._store.get(key)
        if not raw:
            return None
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable value for {key}: {e.error_count()} error(s)")
            return None

    def _save(self, key: str, adapter: TypeAdapter[T], value: T) -> None:
        self._store.set(key, adapter.dump_json(value, by_alias=True).decode("utf-8"))

    def load_route(self) -> tuple[str, str] | None:
        """Return the last requested (from, to) station ids."""
        from_id = self._store.get(FROM_STATION_KEY)
        to_id = self._store.get(TO_STATION_KEY)
        if from_id and to_id:
            return from_id, to_id
        return None

    def save_route(self, from_station_id: str, to_station_id: str) -> None:
        """Persist the current route; empty ids are not written."""
        if from_station_id:
            self._store.set(FROM_STATION_KEY, from_station_id)
        if to_station_id:
            self._store.set(TO_STATION_KEY, to_station_id)

    def load_identifiers(self) -> list[ConnectionIdentifier | None]:
        return self._load(CONNECTIONS_KEY, _identifiers_adapter) or []

    def save_identifiers(self, identifiers: list[ConnectionIdentifier | None]) -> None:
        self._save(CONNECTIONS_KEY, _identifiers_adapter, identifiers)

    def load_station_cache(self) -> list[StationCacheEntry]:
        return self._load(STATION_CACHE_KEY, _stations_adapter) or []

    def save_station_cache(self, stations: list[StationCacheEntry]) -> None:
        self._save(STATION_CACHE_KEY, _stations_adapter, stations)
        logger.info(f"Cached {len(stations)} stations")

    def load_favorites(self) -> list[str] | None:
        """Return favorite station ids, or None when never configured."""
        return self._load(FAVORITE_STATIONS_KEY, _favorites_adapter)

    def save_favorites(self, station_ids: list[str]) -> None:
        self._save(FAVORITE_STATIONS_KEY, _favorites_adapter, station_ids)
        logger.info(f"Saved {len(station_ids)} favorite stations")

    def load_schedules(self) -> list[ScheduleRule]:
        return self._load(SMART_SCHEDULES_KEY, _schedules_adapter) or []

    def save_schedules(self, rules: list[ScheduleRule]) -> None:
        self._save(SMART_SCHEDULES_KEY, _schedules_adapter, rules)
        logger.info(f"Saved {len(rules)} smart schedules")

    def load_language(self) -> str | None:
        return self._store.get(LANGUAGE_KEY) or None

    def save_language(self, language: str) -> None:
        self._store.set(LANGUAGE_KEY, language)
