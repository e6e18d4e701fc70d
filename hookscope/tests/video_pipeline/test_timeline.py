import pytest

from hookscope.video_pipeline.core.analysis.models import FrameAnalysis
from hookscope.video_pipeline.core.analysis.timeline import build_timeline


def frames_at(*timestamps):
    return [FrameAnalysis(timestamp_seconds=t, description=f"at {t}") for t in timestamps]


@pytest.mark.parametrize(
    "timestamps, duration",
    [
        ((0, 2, 4, 6, 8), 10.0),
        ((0, 2, 4, 6), 9.9),
        ((0,), 2.5),
        ((0, 0.3, 0.6), 0.95),
    ],
)
def test_segments_partition_the_video(timestamps, duration):
    timeline = build_timeline(frames_at(*timestamps), duration)

    assert len(timeline) == len(timestamps)
    assert sum(s.duration_seconds for s in timeline) == pytest.approx(duration)
    assert timeline[0].timestamp_seconds == 0
    for current, following in zip(timeline, timeline[1:]):
        assert current.end_seconds == pytest.approx(following.timestamp_seconds)
    assert timeline[-1].end_seconds == pytest.approx(duration)


def test_durations_follow_next_timestamp():
    timeline = build_timeline(frames_at(0, 2, 4), 5.0)

    assert [s.duration_seconds for s in timeline] == [2, 2, 1]
    assert [s.description for s in timeline] == ["at 0", "at 2", "at 4"]


def test_first_segment_anchored_at_zero_when_first_frame_skipped():
    timeline = build_timeline(frames_at(2, 4), 6.0)

    assert timeline[0].timestamp_seconds == 0
    assert timeline[0].duration_seconds == 4


def test_empty_input():
    assert build_timeline([], 10.0) == []
