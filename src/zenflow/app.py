"""Application wiring.

Builds the storage backend, task store, alarm controller, notification
sink and reminder engine from configuration, and owns their lifecycle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .alarm import AlarmController
from .audio import create_alarm_audio
from .config import ZenFlowConfig
from .engine import ReminderEngine, utc_now
from .insights.models import Note
from .notify import NotificationSink, create_notification_sink
from .storage import KeyValueStore, StorageError, create_key_value_store
from .tasks.store import TaskStore

logger = logging.getLogger(__name__)

NOTES_KEY = "zenflow_notes"


class ZenFlowApp:
    """One running ZenFlow instance: store, alarm and engine."""

    def __init__(
        self,
        config: ZenFlowConfig,
        backend: KeyValueStore,
        store: TaskStore,
        controller: AlarmController,
        notifier: NotificationSink,
        engine: ReminderEngine,
    ) -> None:
        self.config = config
        self.backend = backend
        self.store = store
        self.controller = controller
        self.notifier = notifier
        self.engine = engine

    @classmethod
    def from_config(
        cls,
        config: ZenFlowConfig,
        use_mocks: bool = False,
        backend: KeyValueStore | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> ZenFlowApp:
        """Create an app from configuration.

        Args:
            config: Loaded configuration.
            use_mocks: Use mock audio and notifications (no hardware, no desktop).
            backend: Storage backend override. Defaults to the configured one.
            clock: Time source for the engine.

        Returns:
            Wired, not yet started, ZenFlowApp.
        """
        mock_audio = use_mocks or config.testing.mock_audio_enabled
        mock_notify = use_mocks or config.testing.mock_notifications_enabled

        if backend is None:
            backend = create_key_value_store(config.storage)

        store = TaskStore(backend)
        controller = AlarmController(lambda: create_alarm_audio(config.alarm, use_mock=mock_audio))
        notifier = create_notification_sink(config.notifications, use_mock=mock_notify)
        engine = ReminderEngine.from_config(config, store, controller, notifier, clock=clock)

        return cls(config, backend, store, controller, notifier, engine)

    def start(self) -> None:
        """Start the reminder engine."""
        self.engine.start()

    def stop(self) -> None:
        """Stop the reminder engine and silence the alarm."""
        self.engine.stop()

    def load_notes(self) -> list[Note]:
        """Read notes saved by the notes front-end, for insights context."""
        try:
            records = self.backend.get(NOTES_KEY)
        except StorageError as e:
            logger.warning(f"Failed to load notes: {e}")
            return []

        if not isinstance(records, list):
            return []
        return [Note.from_dict(r) for r in records if isinstance(r, dict)]


__all__ = [
    "NOTES_KEY",
    "ZenFlowApp",
]
