"""Mock alarm audio for testing.

Records every call that would reach the audio device.
"""


class MockAlarmAudio:
    """Mock alarm audio implementing the AlarmAudio protocol."""

    def __init__(self, fail_on_play: bool = False) -> None:
        """Initialize mock audio.

        Args:
            fail_on_play: If True, play() raises RuntimeError like a device
                          that refuses to start.
        """
        self._fail_on_play = fail_on_play
        self._is_playing = False
        self._position = 0
        self._loop = False
        self._closed = False
        self._calls: list[str] = []

    def play(self, loop: bool = True) -> None:
        """Record a play call."""
        self._calls.append("play")
        if self._fail_on_play:
            raise RuntimeError("Audio playback blocked")
        self._loop = loop
        self._is_playing = True

    def pause(self) -> None:
        """Record a pause call."""
        self._calls.append("pause")
        self._is_playing = False

    def reset_position(self) -> None:
        """Record a rewind."""
        self._calls.append("reset_position")
        self._position = 0

    def close(self) -> None:
        """Record a close call."""
        self._calls.append("close")
        self._is_playing = False
        self._closed = True

    def advance(self, frames: int) -> None:
        """Simulate playback progress."""
        if self._is_playing:
            self._position += frames

    @property
    def is_playing(self) -> bool:
        """Return True if 'playing'."""
        return self._is_playing

    @property
    def position(self) -> int:
        """Simulated playback position."""
        return self._position

    @property
    def loop(self) -> bool:
        """Whether the last play() asked for looping."""
        return self._loop

    @property
    def closed(self) -> bool:
        """Whether close() was called."""
        return self._closed

    @property
    def calls(self) -> list[str]:
        """Get the recorded call names in order."""
        return self._calls.copy()

    def clear(self) -> None:
        """Clear recorded calls."""
        self._calls.clear()


__all__ = ["MockAlarmAudio"]
