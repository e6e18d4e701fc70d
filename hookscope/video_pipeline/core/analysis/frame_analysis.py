import asyncio
from typing import List

from loguru import logger

from hookscope.exceptions import HookScopeException
from hookscope.providers.base import VisionProvider
from hookscope.video_pipeline.core.analysis.models import FrameAnalysis, FrameSample
from hookscope.video_pipeline.core.analysis.responses import parse_frame_analysis
from hookscope.video_pipeline.prompts import FRAME_ANALYSIS_PROMPT

FRAME_ANALYSIS_FAILED = "Analysis failed"


def failed_frame(timestamp_seconds: float) -> FrameAnalysis:
    return FrameAnalysis(timestamp_seconds=timestamp_seconds, description=FRAME_ANALYSIS_FAILED)


class FrameAnalysisStage:
    """
    One vision call per uniform frame.

    Calls run with bounded concurrency; the output is always in timestamp
    order, whatever order the calls complete in.
    """

    def __init__(self, provider: VisionProvider, max_concurrent_requests: int = 4, max_tokens: int = 500):
        self.provider = provider
        self.max_concurrent_requests = max_concurrent_requests
        self.max_tokens = max_tokens

    async def analyze(self, frame: FrameSample) -> FrameAnalysis:
        timestamp = frame.timestamp_seconds
        prompt = FRAME_ANALYSIS_PROMPT.format(timestamp=timestamp)
        try:
            response = await self.provider.analyze_image(frame.image_bytes, prompt, max_tokens=self.max_tokens)
            return parse_frame_analysis(response.get("analysis"), timestamp)
        except HookScopeException as e:
            logger.warning(f"Frame analysis failed at {timestamp:.2f}s: {e}")
        except Exception:
            logger.exception(f"Unexpected frame analysis error at {timestamp:.2f}s")
        return failed_frame(timestamp)

    async def analyze_all(self, frames: List[FrameSample]) -> List[FrameAnalysis]:
        if not frames:
            logger.warning("No frames to analyze")
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent_requests)

        async def analyze_one(frame: FrameSample) -> FrameAnalysis:
            async with semaphore:
                return await self.analyze(frame)

        logger.info(f"Analyzing {len(frames)} frames ({self.max_concurrent_requests} in flight)")
        results = await asyncio.gather(*(analyze_one(frame) for frame in frames))
        results = sorted(results, key=lambda analysis: analysis.timestamp_seconds)

        failures = sum(1 for r in results if r.description == FRAME_ANALYSIS_FAILED)
        if failures:
            logger.warning(f"{failures}/{len(results)} frame analyses degraded")
        logger.info("Frame analysis finished")
        return results
