"""Data models for tasks.

Defines the Task entity, the QualityScore rating and the snooze re-arm
rule used by the alarm engine.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

DEFAULT_SNOOZE_MINUTES = 5


class QualityScore(Enum):
    """Outcome rating a user gives a completed task."""

    PERFECT = "Perfect"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_WORK = "Needs Work"

    @classmethod
    def parse(cls, raw: str | None) -> "QualityScore":
        """Parse a stored or typed rating, defaulting to PERFECT.

        Accepts the display value ("Needs Work"), the enum name
        ("needs_work") or the first letter ("n").
        """
        if not raw:
            return cls.PERFECT
        text = raw.strip()
        for score in cls:
            if text.lower() in (score.value.lower(), score.name.lower()):
                return score
        if len(text) == 1:
            for score in cls:
                if score.value[0].lower() == text.lower():
                    return score
        raise ValueError(f"Unknown quality score: {raw!r}")


@dataclass(frozen=True)
class Task:
    """A to-do item with an optional due date.

    Attributes:
        id: Unique task identifier, immutable.
        text: Display label.
        completed: Set by user action.
        due_date: When the reminder fires (UTC). None means no schedule.
        reminder_sent: At-most-once gate for the current due_date.
        alarm_enabled: Escalate to a ringing alarm when due.
        quality: Outcome rating, set after completion.
    """

    id: str
    text: str
    completed: bool = False
    due_date: datetime | None = None
    reminder_sent: bool = False
    alarm_enabled: bool = False
    quality: QualityScore = QualityScore.PERFECT

    @classmethod
    def create(
        cls,
        text: str,
        due_date: datetime | None = None,
        alarm_enabled: bool = False,
    ) -> "Task":
        """Create a new, unfired, incomplete task with a fresh id."""
        return cls(
            id=uuid.uuid4().hex,
            text=text,
            due_date=_ensure_utc(due_date) if due_date else None,
            alarm_enabled=alarm_enabled,
        )

    def is_due(self, now: datetime) -> bool:
        """Check whether the reminder for this task should fire at `now`."""
        if self.due_date is None or self.reminder_sent or self.completed:
            return False
        return self.due_date <= now

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat record for storage."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "quality": self.quality.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "reminderSent": self.reminder_sent,
            "alarmEnabled": self.alarm_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from a stored record.

        Raises:
            KeyError: If id or text is missing.
            ValueError: If a field has an invalid value.
        """
        raw_due = data.get("dueDate")
        due_date = _ensure_utc(datetime.fromisoformat(raw_due)) if raw_due else None

        return cls(
            id=str(data["id"]),
            text=str(data["text"]),
            completed=bool(data.get("completed", False)),
            due_date=due_date,
            reminder_sent=bool(data.get("reminderSent", False)),
            alarm_enabled=bool(data.get("alarmEnabled", False)),
            quality=QualityScore.parse(data.get("quality")),
        )


def _ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalize aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def rearm(task: Task, due_date: datetime | None) -> Task:
    """Return a copy of task with a new due date and its reminder re-armed."""
    return replace(
        task,
        due_date=_ensure_utc(due_date) if due_date else None,
        reminder_sent=False,
    )


def snooze_task(task: Task, now: datetime, minutes: int = DEFAULT_SNOOZE_MINUTES) -> Task:
    """Defer a task by a fixed offset from now and re-arm its reminder.

    Args:
        task: The task to snooze.
        now: Current time.
        minutes: Snooze offset.

    Returns:
        Copy of task with due_date = now + minutes and reminder_sent False.
        Completion, quality and alarm settings are unchanged.
    """
    return rearm(task, now + timedelta(minutes=minutes))


__all__ = [
    "DEFAULT_SNOOZE_MINUTES",
    "QualityScore",
    "Task",
    "rearm",
    "snooze_task",
]
