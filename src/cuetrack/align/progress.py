"""Monotonic progress cursor over a reference script.

Runs the character and word aligners over the same window (reference
text from match_start_offset on) and keeps the furthest point either of
them reached. confirmed_offset only moves backwards through jump_to() or
a new start().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cuetrack.align.char_aligner import align_characters
from cuetrack.align.word_aligner import align_words
from cuetrack.text.normalize import collapse_whitespace, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceScript:
    """Reference text for one reading session.

    `text` is the whitespace-collapsed form; all offsets index into it.
    """

    original_text: str
    text: str
    normalized: str

    @classmethod
    def from_text(cls, original_text: str) -> "ReferenceScript":
        collapsed = collapse_whitespace(original_text)
        return cls(original_text=original_text, text=collapsed, normalized=normalize(collapsed))

    def __len__(self) -> int:
        return len(self.text)


@dataclass
class AlignmentState:
    match_start_offset: int = 0
    confirmed_offset: int = 0


class ProgressTracker:
    """Merge CharAligner and WordAligner results into one cursor.

    Interface:
      tracker = ProgressTracker()
      tracker.start("the quick brown fox")
      tracker.on_recognized("the quick")   # -> confirmed_offset
      tracker.jump_to(4)                   # only sanctioned regression
      tracker.resume()                     # re-anchor matching at the cursor
    """

    def __init__(self) -> None:
        self._script = ReferenceScript.from_text("")
        self._state = AlignmentState()

    @property
    def script(self) -> ReferenceScript:
        return self._script

    @property
    def confirmed_offset(self) -> int:
        return self._state.confirmed_offset

    @property
    def match_start_offset(self) -> int:
        return self._state.match_start_offset

    @property
    def reference_length(self) -> int:
        return len(self._script)

    def start(self, reference_text: str) -> None:
        """Begin a new session: replace the script and zero all state."""
        self._script = ReferenceScript.from_text(reference_text)
        self._state = AlignmentState()

    def clear(self) -> None:
        self.start("")

    def window(self) -> str:
        """Reference text from the current match start."""
        return self._script.text[self._state.match_start_offset :]

    def on_recognized(self, spoken_text: str) -> int:
        """Advance the cursor using the latest (cumulative) transcript.

        Returns:
            The confirmed offset after merging.
        """
        if not self._script.text:
            return self._state.confirmed_offset
        window = self.window()
        char_result = align_characters(window, spoken_text)
        word_result = align_words(window, spoken_text)
        best = max(char_result, word_result)
        candidate = min(self._state.match_start_offset + best, len(self._script))
        if candidate > self._state.confirmed_offset:
            logger.debug(
                "progress %d -> %d (char=%d word=%d)",
                self._state.confirmed_offset,
                candidate,
                char_result,
                word_result,
            )
            self._state.confirmed_offset = candidate
        return self._state.confirmed_offset

    def jump_to(self, offset: int) -> int:
        """Move both the match start and the cursor to `offset` (clamped)."""
        offset = max(0, min(int(offset), len(self._script)))
        self._state.match_start_offset = offset
        self._state.confirmed_offset = offset
        return offset

    def resume(self) -> None:
        """Restart matching from wherever the cursor currently is."""
        self._state.match_start_offset = self._state.confirmed_offset
