import os

from loguru import logger

from hookscope.exceptions import ExtractionError, ProbeError
from hookscope.utils.error_handler import convert_exceptions
from hookscope.video_pipeline.core.media.probe import MediaProbe
from hookscope.video_pipeline.utils.helper import CommandError, run_command


class AudioExtractor:
    """Pulls the soundtrack of a video into a compressed mp3 next to it."""

    def __init__(self, probe: MediaProbe = None, bitrate: str = "128k"):
        self.probe = probe or MediaProbe()
        self.bitrate = bitrate

    @convert_exceptions({CommandError: ExtractionError, FileNotFoundError: ExtractionError})
    async def extract(self, video_path: str) -> str:
        """
        Args:
            video_path: Local path to the video file

        Returns:
            str: Path of the extracted mp3, in the same directory as the video

        Raises:
            ExtractionError: If the video has no audio stream, cannot be probed or ffmpeg fails
        """
        try:
            has_audio = await self.probe.has_audio(video_path)
        except ProbeError as e:
            raise ExtractionError(
                f"Could not inspect audio of {video_path}: {e}",
                error_code="AUDIO_PROBE_FAILED",
            ) from e
        if not has_audio:
            raise ExtractionError(
                f"No audio stream in {video_path}",
                error_code="NO_AUDIO_STREAM",
            )

        output_path = os.path.splitext(video_path)[0] + ".mp3"
        command = [
            "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
            "-i", video_path,
            "-vn", "-map", "0:a:0",
            "-acodec", "libmp3lame", "-b:a", self.bitrate,
            output_path,
        ]
        await run_command(command, f"audio extraction of {video_path}")

        if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
            raise ExtractionError(f"Audio extraction produced no output for {video_path}")

        logger.info(f"Extracted audio to {output_path}")
        return output_path
