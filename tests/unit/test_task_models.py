"""Unit tests for Task entity and QualityScore."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from zenflow.tasks.models import QualityScore, Task, rearm, snooze_task

NOW = datetime(2024, 3, 4, 12, 0, 0, tzinfo=UTC)


class TestQualityScore:
    """Tests for QualityScore parsing."""

    def test_parse_display_value(self) -> None:
        """Test parsing the stored display value."""
        assert QualityScore.parse("Needs Work") == QualityScore.NEEDS_WORK
        assert QualityScore.parse("Good") == QualityScore.GOOD

    def test_parse_enum_name(self) -> None:
        """Test parsing the enum name case-insensitively."""
        assert QualityScore.parse("needs_work") == QualityScore.NEEDS_WORK
        assert QualityScore.parse("FAIR") == QualityScore.FAIR

    def test_parse_first_letter(self) -> None:
        """Test single-letter shortcuts."""
        assert QualityScore.parse("p") == QualityScore.PERFECT
        assert QualityScore.parse("n") == QualityScore.NEEDS_WORK

    def test_parse_empty_defaults_to_perfect(self) -> None:
        """Test that a missing rating is Perfect."""
        assert QualityScore.parse(None) == QualityScore.PERFECT
        assert QualityScore.parse("") == QualityScore.PERFECT

    def test_parse_unknown_raises(self) -> None:
        """Test that an unknown rating is rejected."""
        with pytest.raises(ValueError):
            QualityScore.parse("excellent")


class TestTaskCreate:
    """Tests for Task.create()."""

    def test_new_task_defaults(self) -> None:
        """Test a new task is incomplete, unfired and rated Perfect."""
        task = Task.create("Call the bank")
        assert task.text == "Call the bank"
        assert task.completed is False
        assert task.due_date is None
        assert task.reminder_sent is False
        assert task.alarm_enabled is False
        assert task.quality == QualityScore.PERFECT

    def test_ids_are_unique(self) -> None:
        """Test each task gets a fresh id."""
        ids = {Task.create("x").id for _ in range(50)}
        assert len(ids) == 50

    def test_due_date_normalized_to_utc(self) -> None:
        """Test aware due dates are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        task = Task.create("x", due_date=datetime(2024, 3, 4, 14, 0, tzinfo=plus_two))
        assert task.due_date == NOW
        assert task.due_date.tzinfo == UTC

    def test_naive_due_date_treated_as_utc(self) -> None:
        """Test naive due dates are read as UTC."""
        task = Task.create("x", due_date=datetime(2024, 3, 4, 12, 0))
        assert task.due_date == NOW


class TestTaskIsDue:
    """Tests for the due predicate."""

    def test_due_when_time_reached(self) -> None:
        """Test a task is due exactly at its due time."""
        task = Task.create("x", due_date=NOW)
        assert task.is_due(NOW)

    def test_not_due_before_time(self) -> None:
        """Test a future task is not due."""
        task = Task.create("x", due_date=NOW + timedelta(seconds=1))
        assert not task.is_due(NOW)

    def test_not_due_without_date(self) -> None:
        """Test an unscheduled task is never due."""
        assert not Task.create("x").is_due(NOW)

    def test_not_due_once_reminded(self) -> None:
        """Test the reminder fires at most once."""
        task = Task("1", "x", due_date=NOW - timedelta(minutes=1), reminder_sent=True)
        assert not task.is_due(NOW)

    def test_not_due_when_completed(self) -> None:
        """Test completed tasks never fire."""
        task = Task("1", "x", completed=True, due_date=NOW - timedelta(minutes=1))
        assert not task.is_due(NOW)


class TestTaskSerialization:
    """Tests for to_dict/from_dict."""

    def test_to_dict_uses_stored_field_names(self) -> None:
        """Test the persisted record layout."""
        task = Task("abc", "Write report", due_date=NOW, alarm_enabled=True)
        data = task.to_dict()
        assert data == {
            "id": "abc",
            "text": "Write report",
            "completed": False,
            "quality": "Perfect",
            "dueDate": "2024-03-04T12:00:00+00:00",
            "reminderSent": False,
            "alarmEnabled": True,
        }

    def test_from_dict_restores_task(self) -> None:
        """Test a stored record restores every field."""
        task = Task(
            "abc",
            "Write report",
            completed=True,
            due_date=NOW,
            reminder_sent=True,
            alarm_enabled=True,
            quality=QualityScore.FAIR,
        )
        assert Task.from_dict(task.to_dict()) == task

    def test_from_dict_defaults_missing_fields(self) -> None:
        """Test older records without optional fields load."""
        task = Task.from_dict({"id": "1", "text": "Old task"})
        assert task.completed is False
        assert task.due_date is None
        assert task.reminder_sent is False
        assert task.alarm_enabled is False
        assert task.quality == QualityScore.PERFECT

    def test_from_dict_accepts_zulu_timestamps(self) -> None:
        """Test ISO timestamps with a Z suffix."""
        task = Task.from_dict({"id": "1", "text": "x", "dueDate": "2024-03-04T12:00:00Z"})
        assert task.due_date == NOW

    def test_from_dict_missing_text_raises(self) -> None:
        """Test records without text are rejected."""
        with pytest.raises(KeyError):
            Task.from_dict({"id": "1"})

    def test_from_dict_bad_date_raises(self) -> None:
        """Test records with an unparseable date are rejected."""
        with pytest.raises(ValueError):
            Task.from_dict({"id": "1", "text": "x", "dueDate": "tomorrow-ish"})


class TestSnooze:
    """Tests for the snooze re-arm rule."""

    def test_snooze_sets_due_from_now(self) -> None:
        """Test snooze moves the due date to now plus the offset."""
        task = Task("1", "x", due_date=NOW - timedelta(hours=3), reminder_sent=True)
        snoozed = snooze_task(task, NOW)
        assert snoozed.due_date == NOW + timedelta(minutes=5)
        assert snoozed.reminder_sent is False

    def test_snooze_custom_minutes(self) -> None:
        """Test a configured snooze offset."""
        task = Task("1", "x", due_date=NOW, reminder_sent=True)
        assert snooze_task(task, NOW, minutes=10).due_date == NOW + timedelta(minutes=10)

    def test_snooze_keeps_other_fields(self) -> None:
        """Test snooze leaves completion, rating and alarm untouched."""
        task = Task(
            "1",
            "x",
            due_date=NOW,
            reminder_sent=True,
            alarm_enabled=True,
            quality=QualityScore.GOOD,
        )
        snoozed = snooze_task(task, NOW)
        assert snoozed.id == task.id
        assert snoozed.text == task.text
        assert snoozed.completed is False
        assert snoozed.alarm_enabled is True
        assert snoozed.quality == QualityScore.GOOD

    def test_snoozed_task_is_due_again_after_offset(self) -> None:
        """Test a snoozed task fires again once the offset passes."""
        snoozed = snooze_task(Task("1", "x", due_date=NOW, reminder_sent=True), NOW)
        assert not snoozed.is_due(NOW + timedelta(minutes=4))
        assert snoozed.is_due(NOW + timedelta(minutes=5))

    def test_rearm_clears_due_date(self) -> None:
        """Test rearm with None unschedules the task."""
        task = Task("1", "x", due_date=NOW, reminder_sent=True)
        cleared = rearm(task, None)
        assert cleared.due_date is None
        assert cleared.reminder_sent is False
