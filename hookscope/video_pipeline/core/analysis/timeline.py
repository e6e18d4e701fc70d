from typing import List

from loguru import logger

from hookscope.video_pipeline.core.analysis.models import FrameAnalysis, TimelineSegment


def build_timeline(frames: List[FrameAnalysis], total_duration: float) -> List[TimelineSegment]:
    """
    One segment per frame, partitioning [0, total_duration) without gaps.

    Each segment runs until the next frame's timestamp; the last one runs to
    the end of the video. If the first frame is not at 0 (its decode was
    skipped), the first segment is anchored at 0 so the partition still holds.
    """
    usable = [f for f in frames if f.timestamp_seconds < total_duration]
    if len(usable) < len(frames):
        logger.warning(f"Dropped {len(frames) - len(usable)} frames at or past the end of the video")
    if not usable:
        return []

    starts = [f.timestamp_seconds for f in usable]
    starts[0] = 0.0
    ends = starts[1:] + [total_duration]

    return [
        TimelineSegment(
            timestamp_seconds=start,
            description=frame.description,
            duration_seconds=end - start,
        )
        for frame, start, end in zip(usable, starts, ends)
    ]
