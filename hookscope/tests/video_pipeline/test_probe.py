import ffmpeg
import pytest

from hookscope.exceptions import ProbeError
from hookscope.video_pipeline.core.media import probe as probe_module
from hookscope.video_pipeline.core.media.probe import DEFAULT_FRAME_RATE, MediaProbe, parse_frame_rate


@pytest.mark.parametrize(
    "value, expected",
    [
        ("30/1", 30.0),
        ("30000/1001", 30000 / 1001),
        ("25", 25.0),
        ("0/0", DEFAULT_FRAME_RATE),
        ("24/0", DEFAULT_FRAME_RATE),
        ("", DEFAULT_FRAME_RATE),
        (None, DEFAULT_FRAME_RATE),
        ("__import__('os')", DEFAULT_FRAME_RATE),
    ],
)
def test_parse_frame_rate(value, expected):
    assert parse_frame_rate(value) == pytest.approx(expected)


def _probe_result(streams, duration="12.5"):
    return {"format": {"duration": duration}, "streams": streams}


async def test_probe_reads_metadata(monkeypatch):
    info = _probe_result([
        {"codec_type": "audio"},
        {"codec_type": "video", "width": 1080, "height": 1920, "r_frame_rate": "60000/1001"},
    ])
    monkeypatch.setattr(probe_module.ffmpeg, "probe", lambda path: info)

    metadata = await MediaProbe().probe("clip.mp4")

    assert metadata.duration == 12.5
    assert metadata.resolution == "1080x1920"
    assert metadata.is_vertical
    assert metadata.frame_rate == pytest.approx(59.94, rel=1e-3)


async def test_probe_without_video_stream_fails(monkeypatch):
    monkeypatch.setattr(probe_module.ffmpeg, "probe", lambda path: _probe_result([{"codec_type": "audio"}]))

    with pytest.raises(ProbeError):
        await MediaProbe().probe("song.mp3")


async def test_probe_error_from_ffprobe(monkeypatch):
    def broken(path):
        raise ffmpeg.Error("ffprobe", b"", b"moov atom not found")

    monkeypatch.setattr(probe_module.ffmpeg, "probe", broken)

    with pytest.raises(ProbeError) as excinfo:
        await MediaProbe().probe("broken.mp4")
    assert "moov atom" in str(excinfo.value)
    assert excinfo.value.stage == "probing"


async def test_has_audio(monkeypatch):
    monkeypatch.setattr(probe_module.ffmpeg, "probe", lambda path: _probe_result([{"codec_type": "video"}]))
    assert await MediaProbe().has_audio("silent.mp4") is False
