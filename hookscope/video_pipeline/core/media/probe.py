import asyncio
from typing import Any, Dict, Optional

import ffmpeg
from loguru import logger

from hookscope.exceptions import ProbeError
from hookscope.video_pipeline.core.analysis.models import VideoMetadata

DEFAULT_FRAME_RATE = 30.0


def parse_frame_rate(value: Optional[str], default: float = DEFAULT_FRAME_RATE) -> float:
    """
    Parse a container frame-rate field such as "30000/1001" or "25".

    Anything missing, non-numeric, zero or negative yields the default.
    """
    if value is None:
        return default
    text = str(value).strip()
    if not text:
        return default

    numerator, sep, denominator = text.partition("/")
    try:
        num = float(numerator)
        den = float(denominator) if sep else 1.0
    except ValueError:
        logger.warning(f"Unparseable frame rate '{text}', using {default}")
        return default

    if den == 0 or num <= 0 or den < 0:
        return default
    return num / den


class MediaProbe:
    """Reads container metadata with ffprobe."""

    async def _probe(self, video_path: str) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(ffmpeg.probe, video_path)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode(errors="replace") if e.stderr else str(e)
            raise ProbeError(f"ffprobe could not read {video_path}: {stderr.strip()[-300:]}") from e
        except FileNotFoundError as e:
            raise ProbeError(f"ffprobe is not available: {e}") from e

    async def has_audio(self, video_path: str) -> bool:
        info = await self._probe(video_path)
        return any(s.get("codec_type") == "audio" for s in info.get("streams", []))

    async def probe(self, video_path: str) -> VideoMetadata:
        """
        Args:
            video_path: Local path to the video file

        Returns:
            VideoMetadata

        Raises:
            ProbeError: If the file has no decodable video stream
        """
        info = await self._probe(video_path)
        video_stream = next(
            (s for s in info.get("streams", []) if s.get("codec_type") == "video"),
            None,
        )
        if video_stream is None:
            raise ProbeError(f"No video stream found in {video_path}")

        duration = _first_positive(
            info.get("format", {}).get("duration"),
            video_stream.get("duration"),
        )
        if duration is None:
            raise ProbeError(f"Video stream in {video_path} has no usable duration")

        width = int(video_stream.get("width") or 0)
        height = int(video_stream.get("height") or 0)
        if width <= 0 or height <= 0:
            raise ProbeError(f"Video stream in {video_path} has no frame size")

        frame_rate = parse_frame_rate(video_stream.get("r_frame_rate"))
        if frame_rate == DEFAULT_FRAME_RATE and video_stream.get("avg_frame_rate"):
            frame_rate = parse_frame_rate(video_stream.get("avg_frame_rate"))

        metadata = VideoMetadata(duration=duration, width=width, height=height, frame_rate=frame_rate)
        logger.info(
            f"Probed {video_path}: {metadata.duration:.2f}s, {metadata.resolution}, {metadata.frame_rate:.2f} fps"
        )
        return metadata


def _first_positive(*values) -> Optional[float]:
    for value in values:
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if number > 0:
            return number
    return None
