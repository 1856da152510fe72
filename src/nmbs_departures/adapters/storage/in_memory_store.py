"""In-memory key/value store."""

from nmbs_departures.domain.ports import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Key/value store that lives for the lifetime of the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
