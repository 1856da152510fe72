"""Tests for station id resolution and cache refresh."""

import pytest
from fakes import BRUSSELS, GHENT, FakeStationRepository

from nmbs_departures.application.services import CompanionStorage, StationDirectory
from nmbs_departures.domain.models import Err, ErrorKind, Ok, StationCacheEntry


@pytest.mark.asyncio
async def test_refresh_replaces_and_persists_cache(
    storage: CompanionStorage, stations: list[StationCacheEntry]
) -> None:
    """Given a successful fetch, when refreshing, then the cache is replaced and saved."""
    directory = StationDirectory(storage, FakeStationRepository(Ok(stations)))

    assert await directory.refresh() is True

    assert len(directory) == len(stations)
    assert directory.name_for(GHENT) == "Ghent-Sint-Pieters"
    assert storage.load_station_cache() == stations


@pytest.mark.asyncio
async def test_failed_refresh_keeps_cached_stations(
    storage: CompanionStorage, stations: list[StationCacheEntry]
) -> None:
    """Given a cached list, when the refresh fails, then cached stations stay usable."""
    storage.save_station_cache(stations)
    repository = FakeStationRepository(Err.of(ErrorKind.FETCH_FAILED, "Service unavailable", 503))
    directory = StationDirectory(storage, repository)
    directory.load_cached()

    assert await directory.refresh() is False

    assert directory.find(BRUSSELS) == StationCacheEntry(id=BRUSSELS, name="Brussels-Central")


@pytest.mark.asyncio
async def test_empty_station_list_is_ignored(
    storage: CompanionStorage, stations: list[StationCacheEntry]
) -> None:
    """Given an empty fetch result, when refreshing, then the cache is kept."""
    storage.save_station_cache(stations)
    directory = StationDirectory(storage, FakeStationRepository(Ok([])))
    directory.load_cached()

    assert await directory.refresh() is False
    assert len(directory) == len(stations)


def test_unknown_station_falls_back_to_id(storage: CompanionStorage) -> None:
    """Given an empty cache, when resolving a name, then the id is returned."""
    directory = StationDirectory(storage)

    assert directory.load_cached() is False
    assert directory.find(GHENT) is None
    assert directory.name_for(GHENT) == GHENT
