"""Audio level ring buffer and speech detection.

The recognizer hands us one RMS-derived level per audio buffer. Levels
go into a fixed-size ring buffer (oldest dropped); the only thing read
back is whether the recent average says someone is speaking. This path
never touches alignment state.
"""

from __future__ import annotations

import threading
from typing import Optional

import numpy as np

from cuetrack.config import LevelConfig


class LevelRing:
    """Most recent `capacity` level readings, oldest dropped first.

    One reading arrives per audio buffer, so this stays tiny (tens of
    floats); reads return copies in arrival order.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._levels = np.zeros(capacity, dtype=np.float64)
        self._next = 0
        self._filled = 0

    def __len__(self) -> int:
        return self._filled

    def push(self, levels) -> None:
        """Record one reading or a batch of readings."""
        batch = np.atleast_1d(np.asarray(levels, dtype=np.float64))[-self.capacity :]
        if batch.size == 0:
            return
        slots = (self._next + np.arange(batch.size)) % self.capacity
        self._levels[slots] = batch
        self._next = int(slots[-1] + 1) % self.capacity
        self._filled = min(self._filled + batch.size, self.capacity)

    def values(self) -> np.ndarray:
        """All readings, oldest first."""
        start = (self._next - self._filled) % self.capacity
        return self._levels[(start + np.arange(self._filled)) % self.capacity]

    def recent(self, n: int) -> np.ndarray:
        """The last `n` readings (fewer until the ring has filled)."""
        n = max(0, min(n, self._filled))
        return self.values()[self._filled - n :]

    def clear(self) -> None:
        self._next = 0
        self._filled = 0

def rms_level(samples: np.ndarray, gain: float = 5.0) -> float:
    """Map one audio buffer to a display level in [0, 1]: min(rms * gain, 1)."""
    data = np.asarray(samples, dtype=np.float32).ravel()
    if data.size == 0:
        return 0.0
    rms = float(np.sqrt(np.mean(np.square(data))))
    return min(rms * gain, 1.0)


class AudioLevelMeter:
    """Thread-safe level history with a derived is_speaking flag.

    Interface:
      meter = AudioLevelMeter(LevelConfig())
      meter.push(0.2)          # from the audio thread
      meter.is_speaking        # from anywhere
    """

    def __init__(self, config: Optional[LevelConfig] = None):
        self.config = config or LevelConfig()
        self._ring = LevelRing(self.config.capacity)
        self._lock = threading.Lock()

    def push(self, level: float) -> None:
        value = min(max(float(level), 0.0), 1.0)
        with self._lock:
            self._ring.push(value)

    def push_samples(self, samples: np.ndarray) -> float:
        """Compute the level of a raw buffer and record it."""
        level = rms_level(samples, self.config.gain)
        self.push(level)
        return level

    def levels(self) -> np.ndarray:
        """Full history, oldest first, zero-padded on the left to capacity."""
        with self._lock:
            data = self._ring.values()
        if len(data) < self.config.capacity:
            data = np.concatenate([np.zeros(self.config.capacity - len(data)), data])
        return data

    @property
    def is_speaking(self) -> bool:
        with self._lock:
            recent = self._ring.recent(self.config.window)
        if recent.size == 0:
            return False
        return float(recent.mean()) > self.config.threshold

    def clear(self) -> None:
        with self._lock:
            self._ring.clear()
