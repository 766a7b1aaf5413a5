"""Task module for ZenFlow.

Provides the Task model, the snooze re-arm rule and the persisted task store.
"""

from .models import DEFAULT_SNOOZE_MINUTES, QualityScore, Task, rearm, snooze_task
from .store import TASKS_KEY, CompletionStats, TaskStore

__all__ = [
    "DEFAULT_SNOOZE_MINUTES",
    "TASKS_KEY",
    "CompletionStats",
    "QualityScore",
    "Task",
    "TaskStore",
    "rearm",
    "snooze_task",
]
