"""Live speech tracking against a reference script, and live caption segmentation."""

from cuetrack.align import ProgressTracker
from cuetrack.config import CaptionConfig, LevelConfig, RecoveryConfig, TeleprompterConfig
from cuetrack.models import CaptionSegment, TranscriptEvent, TranscriptEventKind
from cuetrack.pipeline import CaptionSession, TeleprompterSession
from cuetrack.stabilizer import SegmentStore, StreamSegmenter

__version__ = "0.1.0"

__all__ = [
    "CaptionConfig",
    "CaptionSegment",
    "CaptionSession",
    "LevelConfig",
    "ProgressTracker",
    "RecoveryConfig",
    "SegmentStore",
    "StreamSegmenter",
    "TeleprompterConfig",
    "TeleprompterSession",
    "TranscriptEvent",
    "TranscriptEventKind",
]
