import pytest

from hookscope.exceptions import AcquisitionError, ValidationException
from hookscope.video_pipeline.core.acquisition import MediaAcquirer, SourceReference


@pytest.mark.parametrize(
    "url",
    [
        "ftp://example.com/video.mp4",
        "file:///etc/passwd",
        "http://localhost:8000/video.mp4",
        "http://127.0.0.1/video.mp4",
        "http://192.168.1.10/video.mp4",
        "https:///video.mp4",
    ],
)
def test_rejected_urls(url):
    with pytest.raises(AcquisitionError):
        MediaAcquirer().validate_url(url)


def test_allowed_domains():
    acquirer = MediaAcquirer(allowed_domains=["tiktok.com"])

    acquirer.validate_url("https://www.tiktok.com/@user/video/1")
    with pytest.raises(AcquisitionError):
        acquirer.validate_url("https://nottiktok.com/video/1")


def test_direct_media_detection():
    assert MediaAcquirer.is_direct_media("https://cdn.example.com/a/b/clip.MP4?sig=1")
    assert not MediaAcquirer.is_direct_media("https://www.tiktok.com/@user/video/1")


def test_empty_sources_are_invalid():
    with pytest.raises(AcquisitionError) as excinfo:
        SourceReference.from_url("   ")
    assert excinfo.value.error_code == "INVALID_URL"
    with pytest.raises(ValidationException):
        SourceReference.from_upload(b"")


async def test_upload_bytes_are_copied(tmp_path):
    destination = tmp_path / "source.mp4"

    await MediaAcquirer().acquire(SourceReference.from_upload(b"video-bytes", "clip.mp4"), str(destination))

    assert destination.read_bytes() == b"video-bytes"


async def test_upload_path_is_copied(tmp_path):
    original = tmp_path / "clip.mov"
    original.write_bytes(b"mov-bytes")
    destination = tmp_path / "source.mp4"

    await MediaAcquirer().acquire(SourceReference.from_upload(str(original)), str(destination))

    assert destination.read_bytes() == b"mov-bytes"
    assert original.exists()


async def test_missing_upload_fails_without_leaving_a_file(tmp_path):
    destination = tmp_path / "source.mp4"

    with pytest.raises(AcquisitionError):
        await MediaAcquirer().acquire(SourceReference.from_upload(str(tmp_path / "nope.mp4")), str(destination))
    assert not destination.exists()


async def test_oversized_upload_is_rejected(tmp_path):
    destination = tmp_path / "source.mp4"
    acquirer = MediaAcquirer(max_download_mb=1)

    with pytest.raises(AcquisitionError):
        await acquirer.acquire(SourceReference.from_upload(b"x" * (1024 * 1024 + 1)), str(destination))
    assert not destination.exists()
