"""Key/value store persisted as a single JSON object on disk."""

import json
import logging
import os
from pathlib import Path

from nmbs_departures.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Keeps all values in memory and rewrites the file on every ``set``.

    The file is replaced atomically, so a crash leaves either the old or the
    new contents.
    """

    def __init__(self, path: Path) -> None:
        """Load existing values from ``path`` if it exists."""
        self._path = path
        self._values: dict[str, str] = {}
        if path.exists():
            self._values = self._read()

    def _read(self) -> dict[str, str]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read storage file {self._path}, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self._path} does not hold an object, starting empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store ``value``; a failed write is logged and the value kept in memory."""
        self._values[key] = value
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(f"Could not write storage file {self._path}: {e}")
