"""Audio module for ZenFlow.

Provides the looping alarm sound used while an alarm is ringing.

Usage:
    # Platform audio via PyAudio
    audio = create_alarm_audio(config.alarm)
    audio.play(loop=True)
    audio.pause()
    audio.reset_position()

    # For testing, use the mock implementation
    from zenflow.audio.mock import MockAlarmAudio
"""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..config import AlarmConfig


class AlarmAudio(Protocol):
    """Interface for the alarm sound.

    One handle plays one fixed audio asset and is reused across ring
    cycles. Position survives pause() until reset_position() is called.
    """

    def play(self, loop: bool = True) -> None:
        """Start playback from the current position.

        Returns immediately while audio plays in background.

        Args:
            loop: Wrap to the start of the asset when it ends

        Raises:
            RuntimeError: If playback cannot be started. Drivers that open
                the device in the background log the failure instead.
        """
        ...

    def pause(self) -> None:
        """Pause playback, keeping the position.

        Safe to call even if nothing is playing.
        """
        ...

    def reset_position(self) -> None:
        """Rewind to the start of the asset."""
        ...

    def close(self) -> None:
        """Stop playback and release the audio device."""
        ...

    @property
    def is_playing(self) -> bool:
        """Return True if audio is currently playing."""
        ...


def create_alarm_audio(
    config: "AlarmConfig | None" = None,
    use_mock: bool = False,
) -> AlarmAudio:
    """Create the alarm audio handle.

    Args:
        config: Alarm configuration (uses defaults if None)
        use_mock: If True, return mock implementation for testing

    Returns:
        AlarmAudio implementation. A silent mock is returned when audio is
        disabled in config, so the alarm state machine still runs.

    Raises:
        RuntimeError: If no audio backend is available
    """
    sound_path = "~/.zenflow/sounds/alarm.wav"
    device_name = "default"
    audio_enabled = True

    if config is not None:
        sound_path = config.sound_path
        device_name = config.output_device
        audio_enabled = config.audio_enabled

    if use_mock or not audio_enabled:
        from .mock import MockAlarmAudio

        return MockAlarmAudio()

    from .player import PyAudioAlarmPlayer

    return PyAudioAlarmPlayer(
        sound_path=Path(sound_path).expanduser(),
        device_name=device_name,
    )


__all__ = [
    "AlarmAudio",
    "create_alarm_audio",
]
