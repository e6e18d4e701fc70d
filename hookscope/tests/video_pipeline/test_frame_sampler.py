import pytest

from hookscope.exceptions import SamplingError
from hookscope.video_pipeline.core.media import frame_sampler as sampler_module
from hookscope.video_pipeline.core.media.frame_sampler import (
    FrameSampler,
    uniform_timestamps,
    window_timestamps,
)
from hookscope.video_pipeline.utils.helper import CommandError


@pytest.mark.parametrize(
    "duration, interval, expected",
    [
        (10.0, 2.0, [0, 2, 4, 6, 8]),
        (9.9, 2.0, [0, 2, 4, 6]),
        (6.0, 2.0, [0, 2, 4]),
        (1.5, 2.0, []),
        (0.9, 0.3, [0, 0.3, 0.6]),
    ],
)
def test_uniform_timestamps(duration, interval, expected):
    timestamps = uniform_timestamps(duration, interval)
    assert timestamps == pytest.approx(expected)
    assert len(timestamps) == len(expected)


def test_window_timestamps_on_long_video():
    assert window_timestamps(3.0, 0.5, duration=5.0) == [0, 0.5, 1, 1.5, 2, 2.5, 3]


def test_window_timestamps_clipped_to_short_video():
    assert window_timestamps(3.0, 0.5, duration=2.0) == [0, 0.5, 1, 1.5, 2]


async def test_undecodable_timestamp_is_skipped(tmp_path, monkeypatch):
    sampler = FrameSampler()

    async def fake_grab(video_path, timestamp, output_path):
        if timestamp == 1.0:
            raise CommandError(["ffmpeg"], 1, "seek past end")
        return b"jpeg"

    monkeypatch.setattr(sampler, "_grab", fake_grab)

    samples = await sampler.sample_at("video.mp4", [0.0, 1.0, 2.0], str(tmp_path))

    assert [s.timestamp_seconds for s in samples] == [0.0, 2.0]


async def test_nothing_decodable_raises(tmp_path, monkeypatch):
    sampler = FrameSampler()

    async def fake_grab(video_path, timestamp, output_path):
        raise CommandError(["ffmpeg"], 1, "invalid data")

    monkeypatch.setattr(sampler, "_grab", fake_grab)

    with pytest.raises(SamplingError):
        await sampler.sample_at("video.mp4", [0.0, 0.5], str(tmp_path))


async def test_sample_uniform_writes_into_frames_subdir(tmp_path, monkeypatch):
    sampler = FrameSampler()
    written = []

    async def fake_grab(video_path, timestamp, output_path):
        written.append(output_path)
        return b"jpeg"

    monkeypatch.setattr(sampler, "_grab", fake_grab)

    samples = await sampler.sample_uniform("video.mp4", 4.0, 2.0, str(tmp_path))

    assert len(samples) == 2
    assert all(path.startswith(str(tmp_path / "frames")) for path in written)


async def test_empty_request_returns_empty(tmp_path):
    assert await FrameSampler().sample_at("video.mp4", [], str(tmp_path)) == []
    assert sampler_module.uniform_timestamps(0, 2.0) == []
