from .context_aggregation import ContextAggregationStage, CONTEXT_QUOTA_EXCEEDED, CONTEXT_UNAVAILABLE
from .frame_analysis import FrameAnalysisStage, FRAME_ANALYSIS_FAILED
from .hook_detection import HookDetectionStage
from .models import (
    AnalysisResult,
    ChangeType,
    ContextAnalysis,
    FrameAnalysis,
    FrameSample,
    HookAnalysis,
    HookStrength,
    HookType,
    Pacing,
    Significance,
    TimelineSegment,
    TimingPattern,
    VideoMetadata,
)
from .timeline import build_timeline
from .timing_patterns import analyze_timing_patterns
from .transcription import (
    NO_AUDIO,
    TRANSCRIPTION_FAILED,
    TRANSCRIPTION_QUOTA_EXCEEDED,
    TranscriptionStage,
)
