"""Unit tests for TaskStore."""

import threading
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from zenflow.storage import StorageError
from zenflow.storage.memory import MemoryStore
from zenflow.tasks.models import QualityScore, Task
from zenflow.tasks.store import TASKS_KEY, CompletionStats, TaskStore

NOW = datetime(2024, 3, 4, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def backend() -> MemoryStore:
    """Create an empty in-memory backend."""
    return MemoryStore()


@pytest.fixture
def store(backend: MemoryStore) -> TaskStore:
    """Create a task store over the memory backend."""
    return TaskStore(backend)


class TestTaskStoreLoad:
    """Tests for loading persisted tasks."""

    def test_empty_backend_loads_empty(self, store: TaskStore) -> None:
        """Test a fresh store is empty."""
        assert store.get_all() == []

    def test_loads_existing_records(self) -> None:
        """Test persisted records are loaded in order."""
        backend = MemoryStore(
            {
                TASKS_KEY: [
                    {"id": "a", "text": "First"},
                    {"id": "b", "text": "Second", "completed": True},
                ]
            }
        )
        store = TaskStore(backend)
        assert [t.id for t in store.get_all()] == ["a", "b"]
        assert store.get("b").completed is True

    def test_corrupt_collection_loads_empty(self) -> None:
        """Test a non-list collection is treated as empty."""
        store = TaskStore(MemoryStore({TASKS_KEY: {"not": "a list"}}))
        assert store.get_all() == []

    def test_invalid_records_are_skipped(self) -> None:
        """Test broken records are dropped and the rest load."""
        backend = MemoryStore(
            {
                TASKS_KEY: [
                    {"id": "a", "text": "Good"},
                    {"id": "b"},
                    "garbage",
                    {"id": "c", "text": "Bad date", "dueDate": "nope"},
                ]
            }
        )
        store = TaskStore(backend)
        assert [t.id for t in store.get_all()] == ["a"]

    def test_duplicate_ids_keep_first(self) -> None:
        """Test only the first record with an id is kept."""
        backend = MemoryStore(
            {TASKS_KEY: [{"id": "a", "text": "One"}, {"id": "a", "text": "Two"}]}
        )
        store = TaskStore(backend)
        assert [t.text for t in store.get_all()] == ["One"]

    def test_read_failure_loads_empty(self) -> None:
        """Test a backend read error starts an empty store."""
        backend = MagicMock()
        backend.get.side_effect = StorageError("disk on fire", key=TASKS_KEY)
        store = TaskStore(backend)
        assert store.get_all() == []


class TestTaskStoreMutations:
    """Tests for task operations."""

    def test_add_prepends(self, store: TaskStore) -> None:
        """Test new tasks go to the top."""
        first = store.add("First")
        second = store.add("Second")
        assert [t.id for t in store.get_all()] == [second.id, first.id]

    def test_add_strips_text(self, store: TaskStore) -> None:
        """Test whitespace around the text is removed."""
        assert store.add("  Buy milk  ").text == "Buy milk"

    def test_add_empty_text_raises(self, store: TaskStore) -> None:
        """Test tasks must have text."""
        with pytest.raises(ValueError):
            store.add("   ")

    def test_add_persists(self, store: TaskStore, backend: MemoryStore) -> None:
        """Test every mutation writes the full collection."""
        task = store.add("Persist me", due_date=NOW, alarm_enabled=True)
        records = backend.get(TASKS_KEY)
        assert records == [task.to_dict()]

    def test_toggle(self, store: TaskStore) -> None:
        """Test toggle flips completion both ways."""
        task = store.add("x")
        assert store.toggle(task.id).completed is True
        assert store.toggle(task.id).completed is False

    def test_toggle_unknown_returns_none(self, store: TaskStore) -> None:
        """Test toggling a missing task."""
        assert store.toggle("missing") is None

    def test_complete_keeps_reminder_fields(self, store: TaskStore) -> None:
        """Test completion does not touch the schedule."""
        task = store.add("x", due_date=NOW)
        completed = store.complete(task.id)
        assert completed.completed is True
        assert completed.due_date == NOW
        assert completed.reminder_sent is False

    def test_rate_completed_task(self, store: TaskStore) -> None:
        """Test rating a completed task."""
        task = store.add("x")
        store.complete(task.id)
        rated = store.rate(task.id, QualityScore.NEEDS_WORK)
        assert rated.quality == QualityScore.NEEDS_WORK

    def test_rate_incomplete_task_rejected(self, store: TaskStore) -> None:
        """Test only completed tasks can be rated."""
        task = store.add("x")
        assert store.rate(task.id, QualityScore.FAIR) is None
        assert store.get(task.id).quality == QualityScore.PERFECT

    def test_reschedule_rearms(self, store: TaskStore) -> None:
        """Test a new due date re-arms the reminder."""
        task = store.add("x", due_date=NOW)
        store.update(task.id, lambda t: Task(t.id, t.text, due_date=t.due_date, reminder_sent=True))
        rescheduled = store.reschedule(task.id, NOW + timedelta(hours=1))
        assert rescheduled.due_date == NOW + timedelta(hours=1)
        assert rescheduled.reminder_sent is False

    def test_delete(self, store: TaskStore) -> None:
        """Test deletion."""
        task = store.add("x")
        assert store.delete(task.id) is True
        assert store.get(task.id) is None
        assert store.delete(task.id) is False

    def test_upcoming_lists_first_three_scheduled(self, store: TaskStore) -> None:
        """Test upcoming shows incomplete scheduled tasks in store order."""
        store.add("no date")
        for i in range(4):
            store.add(f"due {i}", due_date=NOW + timedelta(hours=i))
        done = store.add("done", due_date=NOW)
        store.complete(done.id)

        assert [t.text for t in store.upcoming()] == ["due 3", "due 2", "due 1"]


class TestTaskStoreTransaction:
    """Tests for the transaction contract."""

    def test_unchanged_transaction_writes_nothing(
        self, store: TaskStore, backend: MemoryStore
    ) -> None:
        """Test a read-only transaction does not persist."""
        store.add("x")
        writes = backend.put_count
        with store.transaction():
            pass
        assert backend.put_count == writes

    def test_changed_transaction_writes_once(
        self, store: TaskStore, backend: MemoryStore
    ) -> None:
        """Test edits inside a transaction are committed in one write."""
        store.add("a")
        store.add("b")
        writes = backend.put_count
        with store.transaction() as tasks:
            tasks[0] = Task(tasks[0].id, tasks[0].text, completed=True)
            tasks[1] = Task(tasks[1].id, tasks[1].text, completed=True)
        assert backend.put_count == writes + 1
        assert all(t.completed for t in store.get_all())

    def test_error_in_transaction_commits_nothing(self, store: TaskStore) -> None:
        """Test an exception discards the working copy."""
        task = store.add("x")
        with pytest.raises(RuntimeError), store.transaction() as tasks:
            tasks.clear()
            raise RuntimeError("boom")
        assert store.get(task.id) is not None

    def test_concurrent_toggles_are_serialized(self, store: TaskStore) -> None:
        """Test concurrent updates never lose a write."""
        tasks = [store.add(f"t{i}") for i in range(20)]

        threads = [threading.Thread(target=store.toggle, args=(t.id,)) for t in tasks]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(t.completed for t in store.get_all())


class TestTaskStoreWriteFailure:
    """Tests for persistence failures."""

    def test_write_failure_keeps_memory_state(self) -> None:
        """Test a failed write leaves the in-memory list authoritative."""
        backend = MagicMock()
        backend.get.return_value = None
        backend.put.side_effect = StorageError("quota exceeded")
        store = TaskStore(backend)

        task = store.add("still here")

        assert store.get(task.id) is not None
        assert store.has_unsaved_changes is True

    def test_next_write_retries_full_collection(self) -> None:
        """Test the next mutation writes everything after a failure."""
        backend = MagicMock()
        backend.get.return_value = None
        backend.put.side_effect = [StorageError("quota exceeded"), None]
        store = TaskStore(backend)

        first = store.add("first")
        second = store.add("second")

        saved = backend.put.call_args[0][1]
        assert [r["id"] for r in saved] == [second.id, first.id]
        assert store.has_unsaved_changes is False


class TestCompletionStats:
    """Tests for completion statistics."""

    def test_empty_stats(self, store: TaskStore) -> None:
        """Test stats of an empty list."""
        stats = store.stats()
        assert stats == CompletionStats(total=0, completed=0, perfect=0)
        assert stats.perfect_percentage == 0
        assert stats.active == 0

    def test_perfect_percentage(self, store: TaskStore) -> None:
        """Test the Perfect share of completed tasks."""
        for quality in (QualityScore.PERFECT, QualityScore.PERFECT, QualityScore.FAIR):
            task = store.add("x")
            store.complete(task.id)
            store.rate(task.id, quality)
        store.add("open")

        stats = store.stats()
        assert stats.total == 4
        assert stats.completed == 3
        assert stats.active == 1
        assert stats.perfect_percentage == 67
