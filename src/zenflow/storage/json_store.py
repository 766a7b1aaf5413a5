"""JSON file storage backend.

Each key is stored as its own JSON document in the data directory.
Writes go through a temporary file and an atomic rename so a crash
mid-write never leaves a truncated document behind.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from . import StorageError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore:
    """Key-value store backed by one JSON file per key."""

    def __init__(self, data_dir: Path | str) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory holding the JSON documents. Created on
                      first write if missing.
        """
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        """Directory holding the JSON documents."""
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Get the file path for a key."""
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Load the value stored under key."""
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(f"Invalid JSON in {path}: {e}", key=key) from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", key=key) from e

    def put(self, key: str, value: Any) -> None:
        """Write value under key."""
        path = self.path_for(key)

        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self._data_dir
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {path}: {e}", key=key) from e

        logger.debug(f"Saved {key} to {path}")


__all__ = ["JsonFileStore"]
