"""Teleprompter session: transcript source -> progress tracker -> cursor.

Interface:
  session = TeleprompterSession(source, TeleprompterConfig())
  session.start_background()        # or session.pump() from a test/replay
  session.start("Good evening and welcome ...")
  session.confirmed_offset          # 0..len(reference), never moves back
  session.jump_to(120)              # user tapped a word
  session.stop(); session.resume()
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from cuetrack.align.progress import ProgressTracker
from cuetrack.config import TeleprompterConfig
from cuetrack.interfaces import TranscriptSource
from cuetrack.models import TranscriptEvent
from cuetrack.pipeline.actor import Clock, ErrorCallback, RecognizerSession

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class TeleprompterSession(RecognizerSession):
    """Track how far a reader has progressed through a reference script."""

    def __init__(
        self,
        source: TranscriptSource,
        config: Optional[TeleprompterConfig] = None,
        tracker: Optional[ProgressTracker] = None,
        clock: Optional[Clock] = None,
        on_progress: Optional[ProgressCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.config = config or TeleprompterConfig()
        super().__init__(
            source,
            locale=self.config.speech_locale,
            recovery=self.config.recovery,
            levels=self.config.levels,
            clock=clock,
            on_error=on_error,
        )
        self.tracker = tracker or ProgressTracker()
        self.on_progress = on_progress
        self._last_spoken_text = ""

    @property
    def confirmed_offset(self) -> int:
        return self.tracker.confirmed_offset

    @property
    def reference_text(self) -> str:
        return self.tracker.script.text

    @property
    def last_spoken_text(self) -> str:
        return self._last_spoken_text

    def start(self, reference_text: str) -> None:
        """New reading session: replace the script, zero progress, begin listening."""
        with self._lock:
            self._cleanup()
            self.tracker.start(reference_text)
            self._recovery.reset()
            self._error = None
            self._error_code = None
            self._last_spoken_text = ""
            self._meter.clear()
            self._active = True
            logger.info("teleprompter start (%d chars)", self.tracker.reference_length)
            self._begin()

    def stop(self) -> None:
        with self._lock:
            self._shutdown()

    def force_stop(self) -> None:
        """Stop and drop the script; nothing may restart afterwards."""
        with self._lock:
            self._shutdown()
            self._recovery.exhaust()
            self.tracker.clear()

    def resume(self) -> None:
        """Continue listening, matching from the current cursor."""
        with self._lock:
            self._recovery.reset()
            self.tracker.resume()
            self._active = True
            self._begin()

    def jump_to(self, char_offset: int) -> int:
        """Explicit user jump; the only way the cursor may move backwards."""
        with self._lock:
            offset = self.tracker.jump_to(char_offset)
            self._recovery.reset()
            if self._is_listening:
                self._restart()
            if self.on_progress:
                self.on_progress(offset)
            return offset

    def _can_restart(self) -> bool:
        return self._active and bool(self.tracker.script.text)

    def _on_transcript(self, event: TranscriptEvent) -> None:
        self._last_spoken_text = event.text
        before = self.tracker.confirmed_offset
        after = self.tracker.on_recognized(event.text)
        if after != before and self.on_progress:
            self.on_progress(after)
