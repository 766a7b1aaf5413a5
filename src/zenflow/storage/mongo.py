"""MongoDB storage backend.

Stores each key as a single document: {"_id": key, "value": ..., "updated_at": ...}.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from . import StorageError

logger = logging.getLogger(__name__)


class MongoKeyValueStore:
    """Key-value store backed by a MongoDB collection."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize store with MongoDB collection.

        Args:
            collection: Collection holding one document per key.
        """
        self._collection = collection

    def get(self, key: str) -> Any | None:
        """Load the value stored under key."""
        try:
            doc = self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to read {key} from MongoDB: {e}", key=key) from e

        if doc is None:
            return None
        return doc.get("value")

    def put(self, key: str, value: Any) -> None:
        """Upsert value under key."""
        try:
            self._collection.replace_one(
                {"_id": key},
                {"_id": key, "value": value, "updated_at": datetime.now(UTC)},
                upsert=True,
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to write {key} to MongoDB: {e}", key=key) from e

        logger.debug(f"Saved {key} to MongoDB collection {self._collection.name}")


__all__ = ["MongoKeyValueStore"]
