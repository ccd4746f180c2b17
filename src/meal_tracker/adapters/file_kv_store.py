"""Local JSON file implementation of the key-value store."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from meal_tracker.services.storage import KeyValueStore, StoreReadError

logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores every key in a single JSON object on disk.

    A state file that can't be parsed is never overwritten in place. The next
    write moves it aside as ``<name>.corrupt`` and starts a fresh file.
    """

    path: Path

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(f"{self.path.name}.corrupt")

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Write a key, replacing the file atomically."""
        try:
            data = self._read()
        except StoreReadError:
            logger.warning(
                "Moving unreadable state file aside",
                extra={"path": str(self.path), "backup": str(self.backup_path)},
            )
            os.replace(self.path, self.backup_path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreReadError(f"State file {self.path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise StoreReadError(f"State file {self.path} does not hold an object")
        return data
