"""Task store: the authoritative, persisted list of tasks.

All reads and writes go through one re-entrant lock, so the reminder
engine's scan-then-update and each user action are atomic with respect to
each other. The whole collection is persisted as a flat record list under
a single storage key after every mutation.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime

from ..storage import KeyValueStore, StorageError
from ..storage.memory import MemoryStore
from .models import QualityScore, Task, rearm

logger = logging.getLogger(__name__)

TASKS_KEY = "zenflow_todos"


@dataclass(frozen=True)
class CompletionStats:
    """Completion figures for the task list."""

    total: int
    completed: int
    perfect: int

    @property
    def active(self) -> int:
        """Number of tasks not yet completed."""
        return self.total - self.completed

    @property
    def perfect_percentage(self) -> int:
        """Share of completed tasks rated Perfect, rounded to a whole percent."""
        if self.completed == 0:
            return 0
        return round(self.perfect * 100 / self.completed)


class TaskStore:
    """Thread-safe ordered task collection with durable persistence.

    A missing or corrupt persisted collection loads as empty. When a write
    fails the in-memory list stays authoritative and the next mutation
    writes the full collection again.
    """

    def __init__(self, backend: KeyValueStore | None = None, key: str = TASKS_KEY) -> None:
        """Initialize the store and load persisted tasks.

        Args:
            backend: Key-value store for persistence. Defaults to in-memory.
            key: Storage key for the task collection.
        """
        self._backend: KeyValueStore = backend if backend is not None else MemoryStore()
        self._key = key
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._unsaved = False
        self._load()

    # ------------------------------------------------------------------
    # Core contract
    # ------------------------------------------------------------------

    def get_all(self) -> list[Task]:
        """Return a snapshot of all tasks in store order."""
        with self._lock:
            return list(self._tasks)

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Atomically replace the whole collection and persist it."""
        with self._lock:
            self._tasks = list(tasks)
            self._save()

    @contextmanager
    def transaction(self) -> Iterator[list[Task]]:
        """Hold the store lock around a read-modify-write.

        Yields a working copy of the task list. On clean exit the copy is
        committed with one replace_all, unless it is unchanged, in which
        case nothing is written. On error nothing is committed.

        Usage:
            with store.transaction() as tasks:
                tasks[0] = replace(tasks[0], completed=True)
        """
        with self._lock:
            working = list(self._tasks)
            yield working
            if working != self._tasks:
                self.replace_all(working)

    @property
    def lock(self) -> threading.RLock:
        """The store lock, for callers that must extend an atomic section."""
        return self._lock

    @property
    def has_unsaved_changes(self) -> bool:
        """True if the last write to the backend failed."""
        return self._unsaved

    # ------------------------------------------------------------------
    # Task operations
    # ------------------------------------------------------------------

    def get(self, task_id: str) -> Task | None:
        """Get a task by id."""
        with self._lock:
            for task in self._tasks:
                if task.id == task_id:
                    return task
        return None

    def update(self, task_id: str, fn: Callable[[Task], Task]) -> Task | None:
        """Atomically apply fn to one task.

        Args:
            task_id: Id of the task to update.
            fn: Pure function returning the updated task.

        Returns:
            The updated task, or None if no task has that id.
        """
        with self.transaction() as tasks:
            for i, task in enumerate(tasks):
                if task.id == task_id:
                    updated = fn(task)
                    tasks[i] = updated
                    return updated
        return None

    def add(
        self,
        text: str,
        due_date: datetime | None = None,
        alarm_enabled: bool = False,
    ) -> Task:
        """Create a task and put it at the top of the list.

        Args:
            text: Display label.
            due_date: Optional due time for the reminder.
            alarm_enabled: Ring an alarm when the task is due.

        Returns:
            The created task.
        """
        text = text.strip()
        if not text:
            raise ValueError("Task text must not be empty")

        task = Task.create(text, due_date=due_date, alarm_enabled=alarm_enabled)
        with self.transaction() as tasks:
            tasks.insert(0, task)
        logger.info(f"Added task {task.id}: {task.text}")
        return task

    def toggle(self, task_id: str) -> Task | None:
        """Flip a task's completed flag."""
        return self.update(task_id, lambda t: replace(t, completed=not t.completed))

    def complete(self, task_id: str) -> Task | None:
        """Mark a task completed. Due and reminder fields are left as they are."""
        return self.update(task_id, lambda t: replace(t, completed=True))

    def rate(self, task_id: str, quality: QualityScore) -> Task | None:
        """Rate the outcome of a completed task.

        Returns:
            The updated task, or None if not found or not yet completed.
        """
        with self._lock:
            task = self.get(task_id)
            if task is None or not task.completed:
                return None
            return self.update(task_id, lambda t: replace(t, quality=quality))

    def reschedule(self, task_id: str, due_date: datetime | None) -> Task | None:
        """Change a task's due date, re-arming its reminder."""
        return self.update(task_id, lambda t: rearm(t, due_date))

    def delete(self, task_id: str) -> bool:
        """Remove a task.

        Returns:
            True if removed, False if not found.
        """
        with self.transaction() as tasks:
            for i, task in enumerate(tasks):
                if task.id == task_id:
                    del tasks[i]
                    logger.info(f"Deleted task {task_id}")
                    return True
        return False

    def upcoming(self, limit: int = 3) -> list[Task]:
        """List the first incomplete tasks that have a due date, in store order."""
        with self._lock:
            scheduled = [t for t in self._tasks if not t.completed and t.due_date is not None]
        return scheduled[:limit]

    def stats(self) -> CompletionStats:
        """Compute completion statistics."""
        with self._lock:
            completed = [t for t in self._tasks if t.completed]
            return CompletionStats(
                total=len(self._tasks),
                completed=len(completed),
                perfect=sum(1 for t in completed if t.quality == QualityScore.PERFECT),
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save(self) -> None:
        """Write the full collection to the backend."""
        records = [task.to_dict() for task in self._tasks]
        try:
            self._backend.put(self._key, records)
        except StorageError as e:
            self._unsaved = True
            logger.error(f"Failed to save tasks, keeping in-memory state: {e}")
            return

        self._unsaved = False
        logger.debug(f"Saved {len(records)} tasks")

    def _load(self) -> None:
        """Load the collection from the backend, starting empty on failure."""
        try:
            records = self._backend.get(self._key)
        except StorageError as e:
            logger.error(f"Failed to load tasks, starting empty: {e}")
            return

        if records is None:
            return

        if not isinstance(records, list):
            logger.warning(f"Unexpected task collection type {type(records).__name__}, starting empty")
            return

        seen: set[str] = set()
        for item in records:
            try:
                task = Task.from_dict(item)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping invalid task record: {e}")
                continue
            if task.id in seen:
                logger.warning(f"Skipping duplicate task id {task.id}")
                continue
            seen.add(task.id)
            self._tasks.append(task)

        logger.info(f"Loaded {len(self._tasks)} tasks")


__all__ = [
    "TASKS_KEY",
    "CompletionStats",
    "TaskStore",
]
