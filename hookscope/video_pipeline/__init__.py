"""Short-form video analysis: acquisition, media extraction and inference stages."""

from .core.acquisition import SourceReference
from .core.analysis import AnalysisResult
from .core.analysis_pipeline import AnalysisPipeline, PipelineState, run_analysis
from .core.brief import GenerationRequest, build_generation_request
from .core.events import AnalysisCompletedEvent, AnalysisFailedEvent, EventBus

__all__ = [
    "AnalysisCompletedEvent",
    "AnalysisFailedEvent",
    "AnalysisPipeline",
    "AnalysisResult",
    "EventBus",
    "GenerationRequest",
    "PipelineState",
    "SourceReference",
    "build_generation_request",
    "run_analysis",
]
