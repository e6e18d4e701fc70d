"""
Frame sampling on a uniform grid across the whole video and on a dense grid
over the opening seconds.

Individual timestamps that cannot be decoded are skipped with a warning. A
SamplingError is raised only when nothing at all could be decoded.
"""

import math
import os
from typing import List

from loguru import logger

from hookscope.exceptions import SamplingError
from hookscope.video_pipeline.core.analysis.models import FrameSample
from hookscope.video_pipeline.utils.helper import (
    CommandError,
    ensure_subdir,
    read_bytes,
    run_command,
)

_EPSILON = 1e-9


def uniform_timestamps(duration: float, interval: float) -> List[float]:
    """floor(D / I) timestamps [0, I, 2I, ...]; empty when the video is shorter than one interval."""
    if duration <= 0 or interval <= 0:
        return []
    count = math.floor(duration / interval + _EPSILON)
    return [round(i * interval, 6) for i in range(count)]


def window_timestamps(window_end: float, step: float, duration: float = None) -> List[float]:
    """[0, step, ..., window_end], dropping points past the end of a shorter video."""
    if window_end <= 0 or step <= 0:
        return []
    count = math.floor(window_end / step + _EPSILON)
    timestamps = [round(i * step, 6) for i in range(count + 1)]
    if duration is not None:
        timestamps = [t for t in timestamps if t <= duration]
    return timestamps


class FrameSampler:
    def __init__(self, max_width: int = 1280, jpeg_quality: int = 3):
        self.max_width = max_width
        self.jpeg_quality = jpeg_quality

    async def _grab(self, video_path: str, timestamp: float, output_path: str) -> bytes:
        command = [
            "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
            "-ss", f"{timestamp:.3f}",
            "-i", video_path,
            "-frames:v", "1",
            "-vf", f"scale='min({self.max_width},iw)':-2",
            "-q:v", str(self.jpeg_quality),
            output_path,
        ]
        await run_command(command, f"frame grab at {timestamp:.2f}s")
        if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
            raise CommandError(command, 0, "no frame written")
        return await read_bytes(output_path)

    async def sample_at(self, video_path: str, timestamps: List[float], output_dir: str) -> List[FrameSample]:
        """
        Decode one JPEG per timestamp into output_dir.

        Returns:
            List[FrameSample]: Ascending by timestamp; undecodable timestamps are absent

        Raises:
            SamplingError: If timestamps were requested and none could be decoded
        """
        if not timestamps:
            return []

        samples: List[FrameSample] = []
        failures = 0
        for index, timestamp in enumerate(sorted(timestamps)):
            output_path = os.path.join(output_dir, f"frame_{index:04d}_{int(timestamp * 1000)}ms.jpg")
            try:
                image = await self._grab(video_path, timestamp, output_path)
            except FileNotFoundError as e:
                raise SamplingError(f"ffmpeg is not available: {e}") from e
            except CommandError as e:
                failures += 1
                logger.warning(f"Skipping frame at {timestamp:.2f}s: {e}")
                continue
            samples.append(FrameSample(timestamp_seconds=timestamp, image_bytes=image))

        if not samples:
            raise SamplingError(
                f"Could not decode any of {len(timestamps)} frames from {video_path}",
                details={"requested": len(timestamps)},
            )
        if failures:
            logger.info(f"Sampled {len(samples)}/{len(timestamps)} frames into {output_dir}")
        return samples

    async def sample_uniform(self, video_path: str, duration: float, interval: float, work_dir: str) -> List[FrameSample]:
        timestamps = uniform_timestamps(duration, interval)
        return await self.sample_at(video_path, timestamps, ensure_subdir(work_dir, "frames"))

    async def sample_window(
        self, video_path: str, duration: float, window_end: float, step: float, work_dir: str
    ) -> List[FrameSample]:
        timestamps = window_timestamps(window_end, step, duration)
        return await self.sample_at(video_path, timestamps, ensure_subdir(work_dir, "hook_frames"))
