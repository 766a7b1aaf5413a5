"""Reminder engine: the due-task poll loop and alarm user actions.

A background thread scans the task store every poll interval. Each due
task (scheduled, not completed, not yet reminded, due time reached) gets
exactly one notification and, if its alarm is enabled and no other alarm
is ringing, becomes the ringing alarm. The reminder flag is set in the
same pass, so a task fires at most once per due date.

The store lock covers only the scan and the alarm slot claim. Alarm sound
and notifications start once it is released.

Two alarm tasks due in the same tick are both notified, but only the first
in store order rings; the other's escalation is dropped and not revisited.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .tasks.models import DEFAULT_SNOOZE_MINUTES, Task, snooze_task

if TYPE_CHECKING:
    from .alarm import AlarmController
    from .config import ZenFlowConfig
    from .notify import NotificationSink
    from .tasks.store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 2000
DEFAULT_NOTIFICATION_TITLE = "⏰ ZenFlow Reminder"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class ReminderEngine:
    """Owns the poll thread and mediates alarm dismiss and snooze.

    One engine is constructed per running application. All store access
    happens inside store transactions, and the alarm slot is checked and
    set while the store lock is held, so a tick and a user action never
    interleave.

    Usage:
        engine = ReminderEngine(store, controller, notifier)
        engine.start()
        ...
        engine.snooze_alarm()
        engine.stop()
    """

    def __init__(
        self,
        store: TaskStore,
        controller: AlarmController,
        notifier: NotificationSink,
        *,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        snooze_minutes: int = DEFAULT_SNOOZE_MINUTES,
        notification_title: str = DEFAULT_NOTIFICATION_TITLE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Task store to scan and update.
            controller: Alarm slot for escalated reminders.
            notifier: Sink for reminder notifications.
            poll_interval_ms: Time between scans.
            snooze_minutes: Offset applied on snooze.
            notification_title: Fixed title of every reminder notification.
            clock: Source of the current time.
        """
        self._store = store
        self._controller = controller
        self._notifier = notifier
        self._poll_interval = max(0.1, poll_interval_ms / 1000)
        self._snooze_minutes = snooze_minutes
        self._title = notification_title
        self._clock = clock

        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lifecycle_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: ZenFlowConfig,
        store: TaskStore,
        controller: AlarmController,
        notifier: NotificationSink,
        clock: Callable[[], datetime] = utc_now,
    ) -> ReminderEngine:
        """Create an engine using the reminder and notification settings."""
        return cls(
            store,
            controller,
            notifier,
            poll_interval_ms=config.reminders.poll_interval_ms,
            snooze_minutes=config.reminders.snooze_minutes,
            notification_title=config.notifications.title,
            clock=clock,
        )

    @property
    def store(self) -> TaskStore:
        """The task store being watched."""
        return self._store

    @property
    def controller(self) -> AlarmController:
        """The alarm slot."""
        return self._controller

    @property
    def poll_interval(self) -> float:
        """Seconds between scans."""
        return self._poll_interval

    @property
    def is_running(self) -> bool:
        """Check if the poll thread is running."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the poll thread.

        This method is idempotent - calling it while running has no effect.
        """
        with self._lifecycle_lock:
            if self._thread is not None:
                return

            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._poll_loop,
                daemon=True,
                name="zenflow-reminder-engine",
            )
            self._thread.start()
            logger.info(f"Reminder engine started (poll every {self._poll_interval:.1f}s)")

    def stop(self) -> None:
        """Stop the poll thread and silence any ringing alarm.

        This method is idempotent - calling it multiple times or without
        starting has no effect beyond the first call.
        """
        with self._lifecycle_lock:
            self._stop_event.set()
            if self._thread is not None:
                self._thread.join(timeout=self._poll_interval + 2.0)
                self._thread = None
                logger.info("Reminder engine stopped")
            self._controller.shutdown()

    def _poll_loop(self) -> None:
        """Background loop: tick, then wait for the interval or a stop."""
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Reminder tick failed")

            if self._stop_event.wait(timeout=self._poll_interval):
                break

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def tick(self, now: datetime | None = None) -> list[Task]:
        """Run one scan for due tasks.

        Args:
            now: Time to scan at. Defaults to the engine clock.

        Returns:
            The tasks that fired in this scan, with reminder_sent set.
        """
        if now is None:
            now = self._clock()

        fired: list[Task] = []
        claimed: Task | None = None
        with self._store.transaction() as tasks:
            for i, task in enumerate(tasks):
                if not task.is_due(now):
                    continue

                updated = replace(task, reminder_sent=True)
                if updated.alarm_enabled:
                    if self._controller.claim(updated):
                        claimed = updated
                    else:
                        logger.info(f"Alarm already ringing; escalation dropped for {task.id}")

                tasks[i] = updated
                fired.append(updated)

        # Sound and notifications start after the store lock is released so
        # a slow audio device or notifier cannot hold up user actions.
        if claimed is not None:
            self._controller.sound(claimed)
        for task in fired:
            logger.info(f"Reminder due: {task.text}")
            self._deliver(task)

        return fired

    def _deliver(self, task: Task) -> None:
        """Hand one reminder to the notification sink, best-effort."""
        try:
            self._notifier.notify(self._title, task.text)
        except Exception as e:
            logger.warning(f"Notification for {task.id} failed: {e}")

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def dismiss_alarm(self) -> Task | None:
        """Complete the ringing task and return to idle.

        Returns:
            The completed task, or None if nothing was ringing. If the
            ringing task was deleted meanwhile, the alarm is still released
            and the task as it was when it started ringing is returned.
        """
        with self._store.transaction() as tasks:
            ringing = self._controller.release()
            if ringing is None:
                return None

            for i, task in enumerate(tasks):
                if task.id == ringing.id:
                    tasks[i] = replace(task, completed=True)
                    logger.info(f"Alarm dismissed, task completed: {task.text}")
                    return tasks[i]

        logger.info(f"Alarm dismissed for deleted task {ringing.id}")
        return ringing

    def snooze_alarm(self, now: datetime | None = None) -> Task | None:
        """Defer the ringing task and return to idle.

        The task's due date becomes now + snooze_minutes and its reminder
        is re-armed, so it fires again once that time passes. Completion is
        unchanged.

        Args:
            now: Time of the snooze. Defaults to the engine clock.

        Returns:
            The snoozed task, or None if nothing was ringing.
        """
        if now is None:
            now = self._clock()

        with self._store.transaction() as tasks:
            ringing = self._controller.release()
            if ringing is None:
                return None

            for i, task in enumerate(tasks):
                if task.id == ringing.id:
                    tasks[i] = snooze_task(task, now, self._snooze_minutes)
                    logger.info(f"Alarm snoozed until {tasks[i].due_date}: {task.text}")
                    return tasks[i]

        logger.info(f"Alarm snoozed for deleted task {ringing.id}")
        return ringing


__all__ = [
    "DEFAULT_NOTIFICATION_TITLE",
    "DEFAULT_POLL_INTERVAL_MS",
    "ReminderEngine",
    "utc_now",
]
