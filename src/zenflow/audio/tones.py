"""Audio asset helpers.

Loads WAV files and generates the fallback alarm tone used when the
configured sound file is missing.
"""

import math
import struct
import wave
from dataclasses import dataclass
from pathlib import Path

ALARM_FREQUENCY = 1000  # High, attention-grabbing
ALARM_SAMPLE_RATE = 22050


@dataclass(frozen=True)
class AudioClip:
    """Raw PCM audio with its format."""

    data: bytes
    sample_rate: int
    channels: int = 1
    sample_width: int = 2

    @property
    def frame_size(self) -> int:
        """Bytes per frame."""
        return self.channels * self.sample_width

    @property
    def duration_ms(self) -> int:
        """Clip length in milliseconds."""
        frames = len(self.data) // self.frame_size
        return int(frames * 1000 / self.sample_rate)


def generate_tone(frequency: int, duration_ms: int, sample_rate: int = ALARM_SAMPLE_RATE) -> bytes:
    """Generate a simple sine wave tone.

    Args:
        frequency: Tone frequency in Hz
        duration_ms: Duration in milliseconds
        sample_rate: Sample rate in Hz

    Returns:
        Raw PCM audio bytes (16-bit mono)
    """
    num_samples = int(sample_rate * duration_ms / 1000)
    attack_samples = int(sample_rate * 0.01)  # 10ms attack
    release_samples = int(sample_rate * 0.01)  # 10ms release
    audio_data = []

    for i in range(num_samples):
        t = i / sample_rate
        # Envelope avoids clicks at the edges
        envelope = 1.0
        if i < attack_samples:
            envelope = i / attack_samples
        elif i > num_samples - release_samples:
            envelope = (num_samples - i) / release_samples

        sample = int(32767 * 0.5 * envelope * math.sin(2 * math.pi * frequency * t))
        audio_data.append(struct.pack("<h", sample))

    return b"".join(audio_data)


def generate_silence(duration_ms: int, sample_rate: int = ALARM_SAMPLE_RATE) -> bytes:
    """Generate 16-bit mono silence."""
    return bytes(int(sample_rate * duration_ms / 1000) * 2)


def generate_alarm_clip(sample_rate: int = ALARM_SAMPLE_RATE) -> AudioClip:
    """Generate one cycle of the fallback alarm: two beeps and a pause."""
    beep = generate_tone(ALARM_FREQUENCY, 200, sample_rate)
    gap = generate_silence(100, sample_rate)
    rest = generate_silence(500, sample_rate)
    return AudioClip(data=beep + gap + beep + rest, sample_rate=sample_rate)


def load_wav_file(path: Path) -> AudioClip:
    """Load a WAV file.

    Args:
        path: Path to WAV file

    Returns:
        AudioClip with the file's frames and format

    Raises:
        FileNotFoundError: If file doesn't exist
        wave.Error: If the file is not a readable WAV file
    """
    if not path.exists():
        raise FileNotFoundError(f"WAV file not found: {path}")

    with wave.open(str(path), "rb") as wf:
        return AudioClip(
            data=wf.readframes(wf.getnframes()),
            sample_rate=wf.getframerate(),
            channels=wf.getnchannels(),
            sample_width=wf.getsampwidth(),
        )


__all__ = [
    "AudioClip",
    "generate_alarm_clip",
    "generate_silence",
    "generate_tone",
    "load_wav_file",
]
