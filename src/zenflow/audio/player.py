"""Looping alarm player using PyAudio.

Plays one fixed WAV asset through PortAudio, wrapping back to the first
frame when looping. Frames are written from a background thread so
play() returns immediately.
"""

import logging
import threading
import wave
from pathlib import Path
from typing import Any

import pyaudio

from .tones import AudioClip, generate_alarm_clip, load_wav_file

logger = logging.getLogger(__name__)

CHUNK_FRAMES = 1024


class PyAudioAlarmPlayer:
    """Alarm sound player implementing the AlarmAudio protocol.

    The asset is decoded once at construction. The PortAudio instance is
    opened on first play and kept until close().
    """

    def __init__(
        self,
        sound_path: Path | None = None,
        device_name: str = "default",
    ) -> None:
        """Initialize the alarm player.

        Args:
            sound_path: WAV file to play. Falls back to a generated alarm
                        tone if missing or unreadable.
            device_name: Audio output device name or "default"
        """
        self._device_name = device_name
        self._clip = self._load_clip(sound_path)

        self._pa: Any = None
        self._stream: Any = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._position = 0
        self._loop = True

    @staticmethod
    def _load_clip(sound_path: Path | None) -> AudioClip:
        """Load the alarm asset, falling back to the generated tone."""
        if sound_path is not None:
            try:
                return load_wav_file(sound_path)
            except FileNotFoundError:
                logger.info(f"Alarm sound {sound_path} not found, using generated tone")
            except (wave.Error, EOFError, OSError) as e:
                logger.warning(f"Cannot read alarm sound {sound_path}: {e}; using generated tone")
        return generate_alarm_clip()

    def _get_device_index(self, pa: Any) -> int | None:
        """Get device index for configured device name."""
        if self._device_name == "default":
            return None

        for i in range(pa.get_device_count()):
            info = pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxOutputChannels"] > 0:
                return i

        return None

    def play(self, loop: bool = True) -> None:
        """Start playback from the current position.

        The output stream is opened on the writer thread, so this returns
        without waiting on the audio device. Open failures are logged there.
        """
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return

            self._loop = loop
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._write_loop,
                daemon=True,
                name="zenflow-alarm-audio",
            )
            self._thread.start()
            logger.debug("Alarm audio started")

    def _open_stream(self) -> bool:
        """Open PortAudio and the output stream, returning False on failure."""
        try:
            if self._pa is None:
                self._pa = pyaudio.PyAudio()
            self._stream = self._pa.open(
                format=self._pa.get_format_from_width(self._clip.sample_width),
                channels=self._clip.channels,
                rate=self._clip.sample_rate,
                output=True,
                output_device_index=self._get_device_index(self._pa),
            )
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot open audio output: {e}")
            return False
        return True

    def _write_loop(self) -> None:
        """Write frames to the stream until stopped or the clip ends.

        The writer thread owns the stream: it opens it here and closes it
        on exit, even when pause() stopped waiting for it.
        """
        if not self._open_stream():
            return

        data = self._clip.data
        chunk_bytes = CHUNK_FRAMES * self._clip.frame_size

        try:
            while not self._stop_event.is_set():
                chunk = data[self._position : self._position + chunk_bytes]
                if not chunk:
                    if not self._loop:
                        break
                    self._position = 0
                    continue
                try:
                    self._stream.write(chunk)
                except OSError as e:
                    logger.warning(f"Alarm audio write failed: {e}")
                    break
                self._position += len(chunk)
        finally:
            self._close_stream()

    def _close_stream(self) -> None:
        """Stop and close the output stream, if open."""
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop_stream()
            stream.close()
        except OSError as e:
            logger.warning(f"Error closing alarm stream: {e}")

    def pause(self) -> None:
        """Stop writing frames and close the stream, keeping the position."""
        with self._lock:
            if self._thread is None:
                return

            self._stop_event.set()
            self._thread.join(timeout=2.0)
            self._thread = None
            logger.debug("Alarm audio paused")

    def reset_position(self) -> None:
        """Rewind to the first frame."""
        with self._lock:
            self._position = 0

    def close(self) -> None:
        """Stop playback and terminate PortAudio."""
        self.pause()
        with self._lock:
            if self._pa is not None:
                self._pa.terminate()
                self._pa = None

    @property
    def is_playing(self) -> bool:
        """Return True if frames are being written."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    @property
    def position(self) -> int:
        """Current byte offset into the clip."""
        return self._position

    @property
    def clip(self) -> AudioClip:
        """The decoded alarm asset."""
        return self._clip


__all__ = ["PyAudioAlarmPlayer"]
