import ffmpeg
import pytest

from hookscope.exceptions import ExtractionError
from hookscope.video_pipeline.core.media import audio_extractor as audio_module
from hookscope.video_pipeline.core.media import probe as probe_module
from hookscope.video_pipeline.core.media.audio_extractor import AudioExtractor
from hookscope.video_pipeline.utils.helper import CommandError

WITH_AUDIO = {"format": {"duration": "8.0"}, "streams": [{"codec_type": "video"}, {"codec_type": "audio"}]}
SILENT = {"format": {"duration": "8.0"}, "streams": [{"codec_type": "video"}]}


@pytest.fixture
def video_path(tmp_path):
    path = tmp_path / "source.mp4"
    path.write_bytes(b"mp4")
    return str(path)


def _ffprobe_returns(monkeypatch, info):
    monkeypatch.setattr(probe_module.ffmpeg, "probe", lambda path: info)


async def test_extracts_mp3_next_to_video(video_path, monkeypatch):
    _ffprobe_returns(monkeypatch, WITH_AUDIO)
    commands = []

    async def fake_run(command, description):
        commands.append(command)
        with open(command[-1], "wb") as f:
            f.write(b"mp3-bytes")
        return b""

    monkeypatch.setattr(audio_module, "run_command", fake_run)

    audio_path = await AudioExtractor().extract(video_path)

    assert audio_path.endswith("source.mp3")
    assert commands[0][0] == "ffmpeg"
    assert "libmp3lame" in commands[0]


async def test_video_without_audio_stream(video_path, monkeypatch):
    _ffprobe_returns(monkeypatch, SILENT)

    async def never_run(command, description):
        raise AssertionError("ffmpeg should not run for a silent video")

    monkeypatch.setattr(audio_module, "run_command", never_run)

    with pytest.raises(ExtractionError) as excinfo:
        await AudioExtractor().extract(video_path)
    assert excinfo.value.error_code == "NO_AUDIO_STREAM"


@pytest.mark.parametrize(
    "failure",
    [
        CommandError(["ffmpeg"], 1, "Invalid data found when processing input"),
        FileNotFoundError("ffmpeg"),
    ],
)
async def test_ffmpeg_failures_become_extraction_errors(video_path, monkeypatch, failure):
    _ffprobe_returns(monkeypatch, WITH_AUDIO)

    async def failing_run(command, description):
        raise failure

    monkeypatch.setattr(audio_module, "run_command", failing_run)

    with pytest.raises(ExtractionError) as excinfo:
        await AudioExtractor().extract(video_path)
    assert excinfo.value.error_code != "NO_AUDIO_STREAM"
    assert excinfo.value.__cause__ is failure


async def test_empty_output_is_an_extraction_error(video_path, monkeypatch):
    _ffprobe_returns(monkeypatch, WITH_AUDIO)

    async def empty_run(command, description):
        open(command[-1], "wb").close()
        return b""

    monkeypatch.setattr(audio_module, "run_command", empty_run)

    with pytest.raises(ExtractionError, match="no output"):
        await AudioExtractor().extract(video_path)


async def test_unreadable_container_is_an_extraction_error(video_path, monkeypatch):
    def broken(path):
        raise ffmpeg.Error("ffprobe", b"", b"moov atom not found")

    monkeypatch.setattr(probe_module.ffmpeg, "probe", broken)

    with pytest.raises(ExtractionError) as excinfo:
        await AudioExtractor().extract(video_path)
    assert excinfo.value.error_code == "AUDIO_PROBE_FAILED"
