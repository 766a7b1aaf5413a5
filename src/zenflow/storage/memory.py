"""In-memory storage backend for tests and throwaway sessions."""

import copy
from typing import Any


class MemoryStore:
    """Key-value store kept in a dict.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store, matching the file backends.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._put_count = 0

    def get(self, key: str) -> Any | None:
        """Return a copy of the value under key."""
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        """Store a copy of value under key."""
        self._data[key] = copy.deepcopy(value)
        self._put_count += 1

    @property
    def put_count(self) -> int:
        """Number of writes performed."""
        return self._put_count


__all__ = ["MemoryStore"]
