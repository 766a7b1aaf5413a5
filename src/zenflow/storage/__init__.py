"""Key-value storage for ZenFlow.

Durable put/get of JSON-serializable values. The task store keeps its whole
collection under a single key, so every backend only needs whole-value
reads and writes.

Usage:
    store = create_key_value_store(config.storage)
    store.put("zenflow_todos", [...])
    records = store.get("zenflow_todos")
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..config import StorageConfig


class StorageError(Exception):
    """Raised when a storage backend cannot read or write a value."""

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize storage error.

        Args:
            message: Error message.
            key: Key being read or written, if known.
        """
        super().__init__(message)
        self.key = key


class KeyValueStore(Protocol):
    """Interface for durable key-value storage."""

    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if absent.

        Raises:
            StorageError: If the value exists but cannot be read or decoded.
        """
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key.

        Raises:
            StorageError: If the value cannot be written.
        """
        ...


def create_key_value_store(
    config: "StorageConfig | None" = None,
    use_memory: bool = False,
) -> KeyValueStore:
    """Create the configured key-value store.

    Args:
        config: Storage configuration (uses defaults if None)
        use_memory: If True, return an in-memory store regardless of config

    Returns:
        KeyValueStore implementation for the configured backend

    Raises:
        ValueError: If the configured backend is unknown
    """
    backend = "json"
    data_dir = "~/.zenflow/data"

    if config is not None:
        backend = config.backend.lower()
        data_dir = config.data_dir

    if use_memory or backend == "memory":
        from .memory import MemoryStore

        return MemoryStore()

    if backend == "json":
        from .json_store import JsonFileStore

        return JsonFileStore(Path(data_dir).expanduser())

    if backend == "mongodb" and config is not None:
        from pymongo import MongoClient

        from .mongo import MongoKeyValueStore

        client: MongoClient[dict[str, Any]] = MongoClient(
            config.mongo_uri, serverSelectionTimeoutMS=5000
        )
        return MongoKeyValueStore(client[config.database][config.collection])

    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = [
    "KeyValueStore",
    "StorageError",
    "create_key_value_store",
]
