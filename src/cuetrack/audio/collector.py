"""Microphone level sampling via sounddevice (optional dependency)."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import numpy as np

try:
    import sounddevice as sd
except ImportError:
    sd = None  # type: ignore

from cuetrack.audio.levels import AudioLevelMeter

logger = logging.getLogger(__name__)


class MicrophoneLevelSampler:
    """Feed per-buffer RMS levels from an input device into a meter.

    Runs on sounddevice's audio thread; only the meter's own lock is
    shared with the rest of the session.
    """

    def __init__(
        self,
        meter: AudioLevelMeter,
        sample_rate: int = 16_000,
        channels: int = 1,
        blocksize: int = 1024,
    ):
        self.meter = meter
        self.sample_rate = sample_rate
        self.channels = channels
        self.blocksize = blocksize
        self._stream: Any = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._stream is not None

    def start(self, device: Optional[int] = None) -> None:
        if sd is None:
            raise ImportError("sounddevice is required for level sampling. pip install sounddevice")
        with self._lock:
            if self._stream is not None:
                return
            self._stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="float32",
                blocksize=self.blocksize,
                device=device,
                callback=self._on_audio,
            )
            self._stream.start()
            logger.info("level sampling started (device=%s, %d Hz)", device, self.sample_rate)

    def stop(self) -> None:
        with self._lock:
            if self._stream is None:
                return
            self._stream.stop()
            self._stream.close()
            self._stream = None

    def _on_audio(self, indata: np.ndarray, _frames: int, _time: object, status: object) -> None:
        if status:
            logger.debug("input status: %s", status)
        # first channel only
        self.meter.push_samples(np.asarray(indata)[:, 0] if np.ndim(indata) > 1 else indata)


def list_devices() -> str:
    if sd is None:
        raise ImportError("sounddevice is required to list devices. pip install sounddevice")
    return str(sd.query_devices())
