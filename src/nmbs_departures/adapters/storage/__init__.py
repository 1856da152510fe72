"""Key/value store adapters."""

from nmbs_departures.adapters.storage.in_memory_store import InMemoryStore
from nmbs_departures.adapters.storage.json_file_store import JsonFileStore

__all__ = ["InMemoryStore", "JsonFileStore"]
