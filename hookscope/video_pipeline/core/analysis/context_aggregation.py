from typing import List, Optional

from loguru import logger

from hookscope.exceptions import HookScopeException
from hookscope.providers.base import LLMProvider
from hookscope.utils.error_handler import ErrorHandler
from hookscope.video_pipeline.core.analysis.models import (
    ContextAnalysis,
    FrameAnalysis,
    Pacing,
    VideoMetadata,
)
from hookscope.video_pipeline.core.analysis.responses import parse_context_analysis
from hookscope.video_pipeline.prompts import CONTEXT_AGGREGATION_PROMPT

CONTEXT_UNAVAILABLE = "unavailable"
CONTEXT_QUOTA_EXCEEDED = "quota-exceeded"


def unavailable_context(video_type: str = CONTEXT_UNAVAILABLE) -> ContextAnalysis:
    """Call-failure defaults, kept distinct from the parse-level unknown/standard/neutral/general."""
    return ContextAnalysis(
        video_type=video_type,
        style=CONTEXT_UNAVAILABLE,
        pacing=Pacing.MEDIUM,
        mood=CONTEXT_UNAVAILABLE,
        target_audience=CONTEXT_UNAVAILABLE,
    )


def format_frame_lines(frames: List[FrameAnalysis]) -> str:
    if not frames:
        return "(no frames analyzed)"
    return "\n".join(
        f"[{f.timestamp_seconds:g}s] {f.description} - Objects: {', '.join(f.objects)}" for f in frames
    )


class ContextAggregationStage:
    def __init__(
        self,
        provider: LLMProvider,
        owner_tag: Optional[str] = None,
        temperature: float = 0.7,
    ):
        self.provider = provider
        self.owner_tag = owner_tag
        self.temperature = temperature

    async def aggregate(
        self, transcript: str, frames: List[FrameAnalysis], metadata: VideoMetadata
    ) -> ContextAnalysis:
        """
        Classify the whole video from transcript, ordered frame descriptions and metadata.

        Returns:
            ContextAnalysis: Parsed result, or `unavailable` defaults if the call fails
            (`videoType="quota-exceeded"` when the credential pool is exhausted)
        """
        prompt = CONTEXT_AGGREGATION_PROMPT.format(
            duration=metadata.duration,
            resolution=metadata.resolution,
            frame_rate=metadata.frame_rate,
            transcript=transcript,
            frame_lines=format_frame_lines(frames),
        )
        logger.info("Aggregating video context")
        try:
            response = await self.provider.chat_completion(
                [{"role": "user", "content": prompt}],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
            context = parse_context_analysis(response.get("content"))
        except HookScopeException as e:
            if ErrorHandler.is_quota_error(e):
                logger.warning(f"Context aggregation quota exhausted for '{e.details.get('owner_tag') or self.owner_tag}' credentials")
                return unavailable_context(CONTEXT_QUOTA_EXCEEDED)
            logger.warning(f"Context aggregation failed: {e}")
            return unavailable_context()
        except Exception:
            logger.exception("Unexpected context aggregation error")
            return unavailable_context()

        logger.info(f"Context: {context.video_type}, {context.pacing.value} pacing, {context.mood}")
        return context
