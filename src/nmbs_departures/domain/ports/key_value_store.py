"""Key/value persistence port."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Port for persisting opaque strings by key."""

    def get(self, key: str) -> str | None:
        """Return the stored string, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a string under a key."""
        ...
