"""Stream segmenter: stable-word buffering + commit decisions for live captions.

Turns revisable partial transcripts into an ordered stream of committed
CaptionSegments that are safe to translate.

- Stable: all tokens except the last 0-2 (the unstable tail), which the
  recognizer is still likely to rewrite.
- Pending: stable tokens not yet committed.
- Backtracking: if the recognizer rewrites the already-stable prefix,
  the pending buffer is discarded and stable counting restarts.
- Commit when: the result is final, the buffer reaches the target size,
  the last buffered word ends in . ! ? ; :, enough time has passed since
  the last commit, the silence deadline expires, or the session stops.

Pipeline: recognizer -> segmenter -> store/translator -> display

Minimal deps: none (stdlib only). Time is always passed in by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from cuetrack.models import CaptionSegment
from cuetrack.text.normalize import collapse_whitespace, ends_with_terminal_punctuation, split_words

logger = logging.getLogger(__name__)

PAIR_FLUSH_AFTER_SEC = 1.5
SINGLE_FLUSH_AFTER_SEC = 3.0


def unstable_tail_size(word_count: int, is_final: bool) -> int:
    """How many trailing words of a partial are held back from commitment."""
    if is_final or word_count < 3:
        return 0
    if word_count >= 6:
        return 2
    return 1


@dataclass(frozen=True)
class SegmenterUpdate:
    """Result of feeding one transcript into the segmenter."""

    commits: List[CaptionSegment]
    backtracked: bool = False
    # transcript the caller should arm the silence timer for (None on final)
    silence_transcript: Optional[str] = None


class StreamSegmenter:
    """Segment a live transcript into committed chunks.

    Interface:
      segmenter = StreamSegmenter(target_word_count=6)
      segmenter.reset(now)
      update = segmenter.on_transcript("hello there", is_final=False, now=now)
      segmenter.on_silence(update.silence_transcript, now)   # timer fired
      segmenter.flush(now)                                   # stop: force commit
    """

    def __init__(self, target_word_count: int = 6):
        """
        Args:
            target_word_count: Commit once this many stable words are
                buffered (values below 2 are treated as 2).
        """
        if target_word_count < 1:
            raise ValueError("target_word_count must be >= 1")
        self.target_word_count = target_word_count
        self._next_sequence = 0
        self.reset(0.0)

    def reset(self, now: float) -> None:
        """Start a new stream (listening started). Sequence numbers keep counting."""
        self._pending: List[str] = []
        self._stable_count = 0
        self._committed_count = 0
        self._snapshot: List[str] = []
        self._transcript = ""
        self._last_flush_at = now
        self._last_committed_text = ""

    def restart_sequence(self) -> None:
        """Output was cleared: number segments from zero again."""
        self._next_sequence = 0

    @property
    def pending_words(self) -> List[str]:
        return list(self._pending)

    @property
    def stable_count(self) -> int:
        return self._stable_count

    @property
    def transcript(self) -> str:
        """Latest whitespace-collapsed transcript seen."""
        return self._transcript

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    def on_transcript(self, text: str, is_final: bool, now: float) -> SegmenterUpdate:
        transcript = collapse_whitespace(text)
        if not transcript:
            return SegmenterUpdate(commits=[])
        self._transcript = transcript
        words = split_words(transcript)

        backtracked = self._has_backtracking_rewrite(words)
        if backtracked:
            logger.debug("backtracking rewrite; dropping %d pending words", len(self._pending))
            self._pending.clear()
            self._stable_count = 0
            self._committed_count = 0

        stable = max(len(words) - unstable_tail_size(len(words), is_final), 0)
        if stable > self._stable_count:
            self._pending.extend(words[self._stable_count : stable])
            self._stable_count = stable
        self._snapshot = words

        if is_final:
            commits = self._commit_remainder(now)
            self._end_utterance()
            return SegmenterUpdate(commits=commits, backtracked=backtracked)

        commits = []
        if self.should_commit_pending(now):
            segment = self._commit_pending(now)
            if segment is not None:
                commits.append(segment)
        return SegmenterUpdate(commits=commits, backtracked=backtracked, silence_transcript=transcript)

    def on_silence(self, scheduled_transcript: str, now: float) -> Optional[CaptionSegment]:
        """Silence timer fired; commit only if nothing changed since it was armed."""
        if not self._transcript or self._transcript != collapse_whitespace(scheduled_transcript):
            return None
        commits = self._commit_remainder(now)
        return commits[0] if commits else None

    def flush(self, now: float) -> Optional[CaptionSegment]:
        """Force-commit whatever has not been committed yet (explicit stop)."""
        commits = self._commit_remainder(now)
        return commits[0] if commits else None

    def interrupt(self, now: float) -> Optional[CaptionSegment]:
        """Recognizer is about to be restarted: commit the remainder and start a
        fresh utterance. The next recognizer begins its transcript from scratch,
        so nothing of the old snapshot may be compared against it.
        """
        segment = self.flush(now)
        self._end_utterance()
        return segment

    def should_commit_pending(self, now: float) -> bool:
        if not self._pending:
            return False
        elapsed = now - self._last_flush_at
        count = len(self._pending)
        if count >= max(2, self.target_word_count):
            return True
        if ends_with_terminal_punctuation(self._pending[-1]):
            return True
        if count >= 2 and elapsed >= PAIR_FLUSH_AFTER_SEC:
            return True
        return count >= 1 and elapsed >= SINGLE_FLUSH_AFTER_SEC

    def _end_utterance(self) -> None:
        self._pending.clear()
        self._stable_count = 0
        self._committed_count = 0
        self._snapshot = []
        self._transcript = ""

    def _has_backtracking_rewrite(self, words: List[str]) -> bool:
        if not self._snapshot or self._stable_count <= 0:
            return False
        compare = min(self._stable_count, len(words), len(self._snapshot))
        if compare <= 0:
            return False
        return words[:compare] != self._snapshot[:compare]

    def _commit_pending(self, now: float) -> Optional[CaptionSegment]:
        text = " ".join(self._pending)
        self._pending.clear()
        self._committed_count = self._stable_count
        return self._commit(text, now)

    def _commit_remainder(self, now: float) -> List[CaptionSegment]:
        words = self._snapshot or split_words(self._transcript)
        remainder = words[self._committed_count :]
        self._pending.clear()
        self._committed_count = len(words)
        self._stable_count = max(self._stable_count, len(words))
        segment = self._commit(" ".join(remainder), now)
        return [segment] if segment is not None else []

    def _commit(self, text: str, now: float) -> Optional[CaptionSegment]:
        text = collapse_whitespace(text)
        if not text:
            return None
        if text == self._last_committed_text:
            logger.debug("duplicate commit suppressed: %r", text)
            return None
        self._last_committed_text = text
        self._last_flush_at = now
        segment = CaptionSegment(sequence=self._next_sequence, source_text=text, created_at=now)
        self._next_sequence += 1
        logger.debug("commit #%d %r", segment.sequence, text)
        return segment
