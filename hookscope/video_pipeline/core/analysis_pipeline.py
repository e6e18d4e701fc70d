"""
End-to-end analysis of one short-form video.

AnalysisPipeline owns a fresh working directory per run, drives the media
extraction and inference stages, and always removes the directory before
returning or raising. Inference stages degrade to defaults; only acquisition,
probing, frame extraction and the overall timeout abort a run.
"""

import asyncio
import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union

from loguru import logger

from hookscope.config.settings import HookScopeConfig
from hookscope.exceptions import (
    ExtractionError,
    HookScopeException,
    PipelineException,
    PipelineTimeoutError,
)
from hookscope.providers.credentials import Credential, CredentialResolver, EnvCredentialResolver
from hookscope.providers.factory import ProviderFactory, provider_factory as default_provider_factory
from hookscope.video_pipeline.core.acquisition import MediaAcquirer, SourceReference
from hookscope.video_pipeline.core.analysis import (
    AnalysisResult,
    ContextAggregationStage,
    FrameAnalysisStage,
    FrameSample,
    HookDetectionStage,
    TRANSCRIPTION_FAILED,
    TranscriptionStage,
    VideoMetadata,
    analyze_timing_patterns,
    build_timeline,
)
from hookscope.video_pipeline.core.events import AnalysisCompletedEvent, AnalysisFailedEvent, EventBus
from hookscope.video_pipeline.core.media import AudioExtractor, FrameSampler, MediaProbe
from hookscope.video_pipeline.utils.helper import create_work_dir, remove_tree


class PipelineState(str, Enum):
    ACQUIRING = "acquiring"
    PROBING = "probing"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    ANALYZING_FRAMES = "analyzing_frames"
    DETECTING_HOOK = "detecting_hook"
    AGGREGATING_CONTEXT = "aggregating_context"
    COMPUTING_TIMING_PATTERNS = "computing_timing_patterns"
    BUILDING_TIMELINE = "building_timeline"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunContext:
    """Mutable bookkeeping for one invocation. Never shared between runs."""

    run_id: str
    source: SourceReference
    owner_tag: Optional[str]
    work_dir: Optional[str] = None
    state: Optional[PipelineState] = None
    history: List[PipelineState] = field(default_factory=list)
    failed_stage: Optional[str] = None


@dataclass
class _Stages:
    transcription: TranscriptionStage
    frames: FrameAnalysisStage
    hook: HookDetectionStage
    context: ContextAggregationStage
    providers: Tuple[Any, ...] = ()


async def _gather_or_cancel(*coros):
    """Like asyncio.gather, but a failure cancels and awaits the siblings."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class AnalysisPipeline:
    """
    Runs the analysis for one source at a time per call; concurrent calls are
    independent and share nothing but configuration.

    Args:
        config: Root configuration; read once per run
        credential_resolver: Maps the caller's owner tag to an API credential pool
        provider_factory: Builds the inference providers for a resolved credential
        acquirer, probe, audio_extractor, frame_sampler: Media collaborators,
            defaulted from config when omitted
        event_bus: Receives AnalysisCompletedEvent / AnalysisFailedEvent; never awaited
        state_listener: Optional callable(run_id, state) notified on every transition
    """

    def __init__(
        self,
        config: Optional[HookScopeConfig] = None,
        credential_resolver: Optional[CredentialResolver] = None,
        provider_factory: Optional[ProviderFactory] = None,
        acquirer: Optional[MediaAcquirer] = None,
        probe: Optional[MediaProbe] = None,
        audio_extractor: Optional[AudioExtractor] = None,
        frame_sampler: Optional[FrameSampler] = None,
        event_bus: Optional[EventBus] = None,
        state_listener: Optional[Callable[[str, PipelineState], None]] = None,
    ):
        self.config = config or HookScopeConfig()
        settings = self.config.pipeline
        self.credential_resolver = credential_resolver or EnvCredentialResolver(self.config.credentials)
        self.provider_factory = provider_factory or default_provider_factory
        self.acquirer = acquirer or MediaAcquirer(
            max_download_mb=settings.max_download_mb,
            timeout_seconds=settings.download_timeout_seconds,
            allowed_domains=settings.allowed_domain_list,
        )
        self.probe = probe or MediaProbe()
        self.audio_extractor = audio_extractor or AudioExtractor(self.probe)
        self.frame_sampler = frame_sampler or FrameSampler(max_width=settings.frame_max_width)
        self.event_bus = event_bus
        self.state_listener = state_listener

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    async def __call__(self, source: SourceReference, owner_tag: Optional[str] = None) -> AnalysisResult:
        return await self.run(source, owner_tag)

    async def run(self, source: SourceReference, owner_tag: Optional[str] = None) -> AnalysisResult:
        """
        Analyze one video.

        Args:
            source: URL or upload to analyze
            owner_tag: Credential pool to bill; empty selects the default pool

        Returns:
            AnalysisResult: Complete result; degraded stages carry diagnostic markers

        Raises:
            ConfigurationException: If no credential pool exists for owner_tag (before any download)
            AcquisitionError, ProbeError, SamplingError: Fatal media failures
            PipelineTimeoutError: If the run exceeds the configured wall-clock budget
        """
        ctx = RunContext(run_id=uuid.uuid4().hex[:12], source=source, owner_tag=owner_tag)
        with logger.contextualize(run_id=ctx.run_id):
            return await self._run(ctx)

    async def _run(self, ctx: RunContext) -> AnalysisResult:
        source, owner_tag = ctx.source, ctx.owner_tag
        timeout = self.config.pipeline.timeout_seconds

        try:
            credential = self.credential_resolver.resolve(owner_tag)
            logger.info(f"Starting analysis of {source.describe()} for '{credential.owner_tag}'")
            result = await asyncio.wait_for(self._execute(ctx, credential), timeout=timeout)
        except asyncio.TimeoutError as e:
            error = PipelineTimeoutError(
                f"Analysis exceeded {timeout:g}s budget while {ctx.state.value if ctx.state else 'starting'}",
                details={"run_id": ctx.run_id, "timeout_seconds": timeout},
            )
            await self._fail(ctx, error)
            raise error from e
        except BaseException as e:
            await self._fail(ctx, e)
            raise

        self._transition(ctx, PipelineState.CLEANING_UP)
        await self.cleanup(ctx.work_dir)
        self._transition(ctx, PipelineState.DONE)
        logger.info(f"Analysis finished: {result.summary()}")
        self._publish(AnalysisCompletedEvent(
            run_id=ctx.run_id, source=source.describe(), owner_tag=credential.owner_tag, result=result
        ))
        return result

    async def cleanup(self, work_dir: Optional[str]) -> bool:
        """Remove a run's working directory. Safe to call on a directory that is already gone."""
        return await remove_tree(work_dir)

    # ------------------------------------------------------------------
    # Run body
    # ------------------------------------------------------------------
    async def _execute(self, ctx: RunContext, credential: Credential) -> AnalysisResult:
        settings = self.config.pipeline
        ctx.work_dir = create_work_dir(settings.work_root)
        stages = self._build_stages(credential)
        try:
            self._transition(ctx, PipelineState.ACQUIRING)
            video_path = os.path.join(ctx.work_dir, "source.mp4")
            await self.acquirer.acquire(ctx.source, video_path)

            self._transition(ctx, PipelineState.PROBING)
            metadata = await self.probe.probe(video_path)

            self._transition(ctx, PipelineState.EXTRACTING)
            audio_path, uniform_frames, window_frames = await _gather_or_cancel(
                self._extract_audio(ctx, video_path),
                self.frame_sampler.sample_uniform(
                    video_path, metadata.duration, settings.frame_interval_seconds, ctx.work_dir
                ),
                self.frame_sampler.sample_window(
                    video_path, metadata.duration, settings.window_end_seconds,
                    settings.window_step_seconds, ctx.work_dir,
                ),
            )
            return await self._analyze(ctx, stages, metadata, audio_path, uniform_frames, window_frames)
        finally:
            await self._close_providers(stages)

    async def _analyze(
        self,
        ctx: RunContext,
        stages: _Stages,
        metadata: VideoMetadata,
        audio_path: Union[str, None, ExtractionError],
        uniform_frames: List[FrameSample],
        window_frames: List[FrameSample],
    ) -> AnalysisResult:
        self._transition(ctx, PipelineState.TRANSCRIBING)
        transcription_task = asyncio.ensure_future(self._transcribe(stages.transcription, audio_path))
        try:
            self._transition(ctx, PipelineState.ANALYZING_FRAMES)
            visual_analysis = await stages.frames.analyze_all(uniform_frames)
            uniform_frames.clear()
            transcript = await transcription_task
        finally:
            if not transcription_task.done():
                transcription_task.cancel()
                await asyncio.gather(transcription_task, return_exceptions=True)

        self._transition(ctx, PipelineState.DETECTING_HOOK)
        hook_analysis = await stages.hook.detect_hook(window_frames, transcript)
        window_frames.clear()

        self._transition(ctx, PipelineState.AGGREGATING_CONTEXT)
        context = await stages.context.aggregate(transcript, visual_analysis, metadata)

        self._transition(ctx, PipelineState.COMPUTING_TIMING_PATTERNS)
        timing_patterns = analyze_timing_patterns(visual_analysis)

        self._transition(ctx, PipelineState.BUILDING_TIMELINE)
        timeline = build_timeline(visual_analysis, metadata.duration)

        return AnalysisResult(
            transcription=transcript,
            visual_analysis=visual_analysis,
            context=context,
            hook_analysis=hook_analysis,
            timing_patterns=timing_patterns,
            timeline=timeline,
            metadata=metadata,
        )

    async def _extract_audio(self, ctx: RunContext, video_path: str) -> Union[str, None, ExtractionError]:
        """Path of the audio track, None when there is no audio, or the extraction error."""
        try:
            return await self.audio_extractor.extract(video_path)
        except ExtractionError as e:
            if e.error_code == "NO_AUDIO_STREAM":
                logger.info("Video has no audio stream")
                return None
            logger.warning(f"Audio extraction failed, transcription degraded: {e}")
            return e

    @staticmethod
    async def _transcribe(stage: TranscriptionStage, audio: Union[str, None, ExtractionError]) -> str:
        if isinstance(audio, ExtractionError):
            return TRANSCRIPTION_FAILED
        return await stage.transcribe(audio)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_stages(self, credential: Credential) -> _Stages:
        settings = self.config.pipeline
        transcription_provider = self.provider_factory.create_transcription_provider(
            credential=credential, config=self.config
        )
        vision_provider = self.provider_factory.create_vision_provider(credential=credential, config=self.config)
        llm_provider = self.provider_factory.create_llm_provider(credential=credential, config=self.config)
        return _Stages(
            transcription=TranscriptionStage(
                transcription_provider, self.config.transcription.language, credential.owner_tag
            ),
            frames=FrameAnalysisStage(vision_provider, settings.frame_concurrency),
            hook=HookDetectionStage(vision_provider, settings.window_end_seconds, credential.owner_tag),
            context=ContextAggregationStage(llm_provider, credential.owner_tag),
            providers=(transcription_provider, vision_provider, llm_provider),
        )

    @staticmethod
    async def _close_providers(stages: _Stages) -> None:
        for provider in stages.providers:
            try:
                await provider.close()
            except Exception as e:
                logger.warning(f"Failed to close provider {type(provider).__name__}: {e}")

    def _transition(self, ctx: RunContext, state: PipelineState) -> None:
        ctx.state = state
        ctx.history.append(state)
        logger.info(f"State -> {state.value}")
        if self.state_listener is not None:
            self.state_listener(ctx.run_id, state)

    async def _fail(self, ctx: RunContext, error: BaseException) -> None:
        if isinstance(error, PipelineException):
            ctx.failed_stage = error.stage
        elif ctx.state is not None:
            ctx.failed_stage = ctx.state.value
        else:
            ctx.failed_stage = "starting"

        # Cleanup runs before the error reaches the caller, cancelled or not.
        self._transition(ctx, PipelineState.CLEANING_UP)
        await asyncio.shield(self.cleanup(ctx.work_dir))
        self._transition(ctx, PipelineState.FAILED)

        if isinstance(error, HookScopeException):
            logger.error(f"Analysis failed while {ctx.failed_stage}: {error}")
        elif isinstance(error, Exception):
            logger.exception(f"Unexpected failure while {ctx.failed_stage}")
        else:
            logger.warning(f"Analysis interrupted while {ctx.failed_stage}")

        if isinstance(error, Exception):
            self._publish(AnalysisFailedEvent(
                run_id=ctx.run_id, source=ctx.source.describe(), owner_tag=ctx.owner_tag,
                error=error, stage=ctx.failed_stage or "",
            ))

    def _publish(self, event) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event)


def as_source(source: Union[str, SourceReference]) -> SourceReference:
    """Accept a SourceReference, a URL, or a path to a local file."""
    if isinstance(source, SourceReference):
        return source
    if os.path.isfile(source):
        return SourceReference.from_upload(source)
    return SourceReference.from_url(source)


async def run_analysis(
    source: Union[str, SourceReference],
    owner_tag: Optional[str] = None,
    config: Optional[HookScopeConfig] = None,
    event_bus: Optional[EventBus] = None,
) -> AnalysisResult:
    """Analyze one video with providers and credentials taken from configuration."""
    pipeline = AnalysisPipeline(config=config, event_bus=event_bus)
    return await pipeline.run(as_source(source), owner_tag)
