"""Bounded, sequence-ordered store of committed caption segments.

Segments may be staged out of order (translations finish whenever they
finish); the visible window is always the most recent N by sequence.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from cuetrack.models import CaptionSegment

PRUNE_ABOVE = 120
PRUNE_KEEP = 60


class SegmentStore:
    def __init__(self, max_visible: int = 4, prune_above: int = PRUNE_ABOVE, keep: int = PRUNE_KEEP) -> None:
        if max_visible < 1:
            raise ValueError("max_visible must be >= 1")
        if keep < max_visible or prune_above < keep:
            raise ValueError("need max_visible <= keep <= prune_above")
        self.max_visible = max_visible
        self.prune_above = prune_above
        self.keep = keep
        self._segments: Dict[int, CaptionSegment] = {}

    def __len__(self) -> int:
        return len(self._segments)

    def get(self, sequence: int) -> Optional[CaptionSegment]:
        return self._segments.get(sequence)

    def stage(self, segment: CaptionSegment) -> List[CaptionSegment]:
        """Insert or replace a segment by sequence; return the visible window."""
        self._segments[segment.sequence] = segment
        if len(self._segments) > self.prune_above:
            ordered = self.ordered()
            self._segments = {s.sequence: s for s in ordered[-self.keep :]}
        return self.visible()

    def update_translation(self, sequence: int, translated_text: str) -> bool:
        """Attach a translation; False if the segment was pruned or cleared."""
        current = self._segments.get(sequence)
        if current is None:
            return False
        self._segments[sequence] = current.with_translation(translated_text)
        return True

    def ordered(self) -> List[CaptionSegment]:
        return [self._segments[k] for k in sorted(self._segments)]

    def visible(self) -> List[CaptionSegment]:
        return self.ordered()[-self.max_visible :]

    def clear(self) -> None:
        self._segments.clear()
