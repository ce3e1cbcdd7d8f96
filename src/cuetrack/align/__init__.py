"""Teleprompter alignment: character aligner, word aligner, progress cursor."""

from cuetrack.align.char_aligner import align_characters
from cuetrack.align.progress import AlignmentState, ProgressTracker, ReferenceScript
from cuetrack.align.word_aligner import align_words

__all__ = [
    "AlignmentState",
    "ProgressTracker",
    "ReferenceScript",
    "align_characters",
    "align_words",
]
