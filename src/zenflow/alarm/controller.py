"""Ringing alarm state controller.

Holds at most one ringing task. A task that becomes due while another is
ringing does not preempt it: the first due alarm rings until dismissed or
snoozed. Every exit from RINGING pauses the alarm sound and rewinds it, so
the next ring starts from the top.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..audio import AlarmAudio
    from ..tasks.models import Task

logger = logging.getLogger(__name__)


class AlarmState(Enum):
    """State of the alarm slot."""

    IDLE = "idle"
    RINGING = "ringing"


class AlarmController:
    """Single-slot alarm state machine driving the alarm sound.

    The audio handle is created lazily by audio_factory on the first ring
    and reused for every later ring. Audio failures are logged and never
    raised: a ring without sound is still a ring.

    Usage:
        controller = AlarmController(lambda: create_alarm_audio(config.alarm))
        controller.ring(task)     # IDLE -> RINGING
        controller.claim(task)    # IDLE -> RINGING, sound deferred
        controller.sound(task)    # start the sound for the claimed task
        controller.release()      # RINGING -> IDLE, sound stopped
        controller.shutdown()
    """

    def __init__(
        self,
        audio_factory: Callable[[], AlarmAudio] | None = None,
        on_ring: Callable[[Task], None] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            audio_factory: Creates the alarm audio handle on first ring.
                           None runs the state machine without sound.
            on_ring: Optional callback when a task starts ringing, used by
                     front-ends to show the alarm. Must return quickly.
        """
        self._audio_factory = audio_factory
        self._audio: AlarmAudio | None = None
        self._current: Task | None = None
        self._lock = threading.RLock()
        self.on_ring = on_ring

    @property
    def state(self) -> AlarmState:
        """Current state of the slot."""
        return AlarmState.RINGING if self._current is not None else AlarmState.IDLE

    @property
    def is_ringing(self) -> bool:
        """Return True if a task is ringing."""
        return self._current is not None

    @property
    def current(self) -> Task | None:
        """The ringing task, or None when idle."""
        return self._current

    @property
    def audio(self) -> AlarmAudio | None:
        """The audio handle, once created."""
        return self._audio

    def claim(self, task: Task) -> bool:
        """Take the alarm slot for a task without starting the sound.

        Callers holding other locks claim first and call sound() once those
        locks are released, so audio startup never runs under them.

        Args:
            task: The due task to ring for.

        Returns:
            True if the task now holds the slot, False if the slot was taken.
        """
        with self._lock:
            if self._current is not None:
                logger.debug(
                    f"Alarm slot busy with {self._current.id}; not ringing {task.id}"
                )
                return False

            self._current = task
            logger.info(f"Alarm ringing: {task.text}")
            return True

    def sound(self, task: Task) -> None:
        """Start the alarm sound and announce a claimed task.

        Does nothing if the task no longer holds the slot, e.g. it was
        dismissed between claim() and sound().
        """
        with self._lock:
            if self._current is None or self._current.id != task.id:
                return
            self._start_audio()

        if self.on_ring is not None:
            try:
                self.on_ring(task)
            except Exception as e:
                logger.warning(f"Alarm ring callback failed: {e}")

    def ring(self, task: Task) -> bool:
        """Start ringing for a task if the slot is free.

        This method is idempotent - calling it while already ringing has no
        effect, whichever task is passed.

        Args:
            task: The due task to ring for.

        Returns:
            True if the task is now ringing, False if the slot was taken.
        """
        if not self.claim(task):
            return False
        self.sound(task)
        return True

    def release(self) -> Task | None:
        """Leave the ringing state and stop the sound.

        Returns:
            The task that was ringing, or None if already idle.
        """
        with self._lock:
            task = self._current
            if task is None:
                return None

            self._current = None
            self._stop_audio()
            logger.info(f"Alarm released: {task.text}")
            return task

    def shutdown(self) -> None:
        """Release any ringing alarm and close the audio device."""
        with self._lock:
            self.release()
            if self._audio is not None:
                try:
                    self._audio.close()
                except Exception as e:
                    logger.warning(f"Error closing alarm audio: {e}")
                self._audio = None

    def _start_audio(self) -> None:
        """Create the audio handle if needed and start looping playback."""
        if self._audio is None:
            if self._audio_factory is None:
                return
            try:
                self._audio = self._audio_factory()
            except Exception as e:
                logger.warning(f"Alarm audio unavailable: {e}")
                return

        try:
            self._audio.play(loop=True)
        except Exception as e:
            logger.warning(f"Alarm audio failed to start: {e}")

    def _stop_audio(self) -> None:
        """Pause playback and rewind to the start."""
        if self._audio is None:
            return

        try:
            self._audio.pause()
        except Exception as e:
            logger.warning(f"Alarm audio failed to pause: {e}")
        try:
            self._audio.reset_position()
        except Exception as e:
            logger.warning(f"Alarm audio failed to rewind: {e}")


__all__ = [
    "AlarmController",
    "AlarmState",
]
