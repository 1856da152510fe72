"""Shared fixtures."""

import pytest
from fakes import ANTWERP, BRUSSELS, GHENT, LEUVEN, RecordingTransport

from nmbs_departures.adapters.storage import InMemoryStore
from nmbs_departures.application.services import CompanionStorage
from nmbs_departures.domain.models import StationCacheEntry


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def storage(store: InMemoryStore) -> CompanionStorage:
    return CompanionStorage(store)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def stations() -> list[StationCacheEntry]:
    return [
        StationCacheEntry(id=GHENT, name="Ghent-Sint-Pieters"),
        StationCacheEntry(id=BRUSSELS, name="Brussels-Central"),
        StationCacheEntry(id=ANTWERP, name="Antwerp-Central"),
        StationCacheEntry(id=LEUVEN, name="Leuven"),
    ]
