"""Live-caption segmentation and the committed-segment store."""

from cuetrack.stabilizer.segment_store import SegmentStore
from cuetrack.stabilizer.stream_segmenter import SegmenterUpdate, StreamSegmenter, unstable_tail_size

__all__ = ["SegmentStore", "SegmenterUpdate", "StreamSegmenter", "unstable_tail_size"]
