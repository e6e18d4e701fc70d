from typing import List, Optional

from loguru import logger

from hookscope.exceptions import HookScopeException
from hookscope.providers.base import VisionProvider
from hookscope.utils.error_handler import ErrorHandler
from hookscope.video_pipeline.core.analysis.models import FrameSample, HookAnalysis
from hookscope.video_pipeline.core.analysis.responses import parse_hook_analysis
from hookscope.video_pipeline.core.analysis.transcription import quota_owner
from hookscope.video_pipeline.prompts import HOOK_DETECTION_PROMPT, format_timestamps

HOOK_QUOTA_EXCEEDED = "Hook detection failed: quota exceeded for '{owner_tag}' credentials"
HOOK_FAILED = "Hook detection failed: {error}"


def failed_hook(description: str) -> HookAnalysis:
    return HookAnalysis(description=description, confidence=0.0)


class HookDetectionStage:
    """Judges the opening window as a whole: every window frame plus the transcript in one call."""

    def __init__(
        self,
        provider: VisionProvider,
        window_end_seconds: float = 3.0,
        owner_tag: Optional[str] = None,
        max_tokens: int = 800,
    ):
        self.provider = provider
        self.window_end_seconds = window_end_seconds
        self.owner_tag = owner_tag
        self.max_tokens = max_tokens

    async def detect_hook(self, window_frames: List[FrameSample], transcript: str) -> HookAnalysis:
        if not window_frames:
            logger.warning("No opening-window frames; hook detection skipped")
            return failed_hook(HOOK_FAILED.format(error="no opening-window frames"))

        frames = sorted(window_frames, key=lambda f: f.timestamp_seconds)
        prompt = HOOK_DETECTION_PROMPT.format(
            window_end=self.window_end_seconds,
            frame_count=len(frames),
            timestamps=format_timestamps([f.timestamp_seconds for f in frames]),
            transcript=transcript,
        )
        logger.info(f"Detecting hook over {len(frames)} opening frames")
        try:
            response = await self.provider.analyze_images(
                [f.image_bytes for f in frames], prompt, max_tokens=self.max_tokens
            )
            hook = parse_hook_analysis(response.get("analysis"), self.window_end_seconds)
        except HookScopeException as e:
            if ErrorHandler.is_quota_error(e):
                owner = quota_owner(e, self.owner_tag)
                logger.warning(f"Hook detection quota exhausted for '{owner}' credentials")
                return failed_hook(HOOK_QUOTA_EXCEEDED.format(owner_tag=owner))
            logger.warning(f"Hook detection failed: {e}")
            return failed_hook(HOOK_FAILED.format(error=e))
        except Exception as e:
            logger.exception("Unexpected hook detection error")
            return failed_hook(HOOK_FAILED.format(error=e))

        logger.info(f"Hook detected: {hook.type.value}/{hook.strength.value} at {hook.timestamp_seconds:.2f}s")
        return hook
