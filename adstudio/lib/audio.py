# adstudio/lib/audio.py
from __future__ import annotations

import io
import time
import wave
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

import numpy as np


@dataclass(frozen=True)
class AudioBuffer:
    samples: np.ndarray  # float32 in [-1, 1), shape (frames, channels)
    sample_rate: int

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        return self.frames / float(self.sample_rate)


def decode_pcm16(data: bytes, *, sample_rate: int = 24000, channels: int = 1) -> AudioBuffer:
    """Raw 16-bit little-endian interleaved PCM -> float buffer."""
    usable = len(data) - (len(data) % (2 * channels))
    ints = np.frombuffer(data[:usable], dtype="<i2")
    frames = ints.shape[0] // channels
    samples = ints.reshape(frames, channels).astype(np.float32) / 32768.0
    return AudioBuffer(samples=samples, sample_rate=sample_rate)


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    clipped = np.clip(samples, -1.0, 1.0)
    pcm = (clipped * 32767.0).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(int(samples.shape[1]) if samples.ndim == 2 else 1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


class AudioSink(Protocol):
    @property
    def current_time(self) -> float:
        """Output clock in seconds."""
        ...

    def play(self, buffer: AudioBuffer, at: float) -> None: ...


class TimelineSink:
    """
    Output sink that lays every scheduled buffer onto a single timeline instead
    of a sound card. `clock` returns seconds; it defaults to time since creation.
    """

    def __init__(self, *, sample_rate: int = 24000, channels: int = 1, clock: Optional[Callable[[], float]] = None):
        self.sample_rate = sample_rate
        self.channels = channels
        if clock is None:
            origin = time.monotonic()
            clock = lambda: time.monotonic() - origin
        self._clock = clock
        self._entries: List[Tuple[float, AudioBuffer]] = []

    @property
    def current_time(self) -> float:
        return float(self._clock())

    def play(self, buffer: AudioBuffer, at: float) -> None:
        if buffer.sample_rate != self.sample_rate or buffer.channels != self.channels:
            raise ValueError(
                f"sink expects {self.sample_rate} Hz x{self.channels}, "
                f"got {buffer.sample_rate} Hz x{buffer.channels}"
            )
        self._entries.append((at, buffer))

    @property
    def scheduled(self) -> List[Tuple[float, float]]:
        """(start, duration) per buffer, in scheduling order."""
        return [(at, b.duration) for at, b in self._entries]

    def render(self) -> np.ndarray:
        if not self._entries:
            return np.zeros((0, self.channels), dtype=np.float32)
        starts = [int(round(at * self.sample_rate)) for at, _ in self._entries]
        total = max(s + b.frames for s, (_, b) in zip(starts, self._entries))
        out = np.zeros((total, self.channels), dtype=np.float32)
        for s, (_, b) in zip(starts, self._entries):
            out[s:s + b.frames] += b.samples
        return out

    def to_wav(self) -> bytes:
        return encode_wav(self.render(), self.sample_rate)


@dataclass(frozen=True)
class ScheduledPlayback:
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


class PlaybackQueue:
    """
    Gapless FIFO playback on one sink. `next_start_time` is the end of the
    last scheduled buffer; a new buffer starts at the later of that and the
    sink clock. Single writer, no locking.
    """

    def __init__(self, sink: AudioSink):
        self.sink = sink
        self.next_start_time = 0.0

    def schedule(self, buffer: AudioBuffer) -> ScheduledPlayback:
        start = max(self.next_start_time, self.sink.current_time)
        self.sink.play(buffer, start)
        self.next_start_time = start + buffer.duration
        return ScheduledPlayback(start=start, duration=buffer.duration)
