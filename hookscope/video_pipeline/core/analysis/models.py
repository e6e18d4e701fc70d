"""
Records produced by one analysis run.

Everything here except FrameSample is immutable once built. FrameSample is
the only record that carries image bytes, and it never outlives the run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class HookType(str, Enum):
    VISUAL = "visual"
    VERBAL = "verbal"
    TEXT = "text"
    MOVEMENT = "movement"
    SOUND = "sound"
    MIXED = "mixed"


class HookStrength(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class Pacing(str, Enum):
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class ChangeType(str, Enum):
    SCENE = "scene"
    AUDIO = "audio"
    PACE = "pace"
    TEXT = "text"
    TRANSITION = "transition"


class Significance(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class VideoMetadata(_Record):
    duration: float = Field(..., gt=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    frame_rate: float = Field(..., gt=0)

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def is_vertical(self) -> bool:
        return self.height > self.width


@dataclass(frozen=True)
class FrameSample:
    """One still image pulled from the video."""

    timestamp_seconds: float
    image_bytes: bytes = field(repr=False)


class FrameAnalysis(_Record):
    timestamp_seconds: float = Field(..., ge=0)
    description: str = ""
    objects: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    composition: str = ""
    actions: List[str] = Field(default_factory=list)


class HookAnalysis(_Record):
    timestamp_seconds: float = Field(default=0.0, ge=0)
    type: HookType = HookType.VISUAL
    strength: HookStrength = HookStrength.MEDIUM
    description: str = ""
    key_elements: List[str] = Field(default_factory=list)
    replication_tips: List[str] = Field(default_factory=list)
    visual_cues: Optional[List[str]] = None
    audio_cues: Optional[List[str]] = None
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)


class ContextAnalysis(_Record):
    video_type: str = "unknown"
    style: str = "standard"
    pacing: Pacing = Pacing.MEDIUM
    hooks: List[str] = Field(default_factory=list)
    dominant_colors: List[str] = Field(default_factory=list)
    mood: str = "neutral"
    target_audience: str = "general"


class TimingPattern(_Record):
    time_range: Tuple[float, float]
    change_type: ChangeType
    significance: Significance
    description: str
    impact: Optional[str] = None

    @model_validator(mode="after")
    def _check_range(self):
        start, end = self.time_range
        if not start < end:
            raise ValueError(f"time_range start must be before end, got {self.time_range}")
        return self


class TimelineSegment(_Record):
    timestamp_seconds: float = Field(..., ge=0)
    description: str
    duration_seconds: float = Field(..., gt=0)

    @property
    def end_seconds(self) -> float:
        return self.timestamp_seconds + self.duration_seconds


class AnalysisResult(_Record):
    """Aggregate of one complete run. Every field is always populated."""

    transcription: str
    visual_analysis: List[FrameAnalysis]
    context: ContextAnalysis
    hook_analysis: HookAnalysis
    timing_patterns: List[TimingPattern]
    timeline: List[TimelineSegment]
    metadata: VideoMetadata

    def summary(self) -> Dict[str, Any]:
        """Compact projection for notification and record-keeping sinks."""
        return {
            "duration": self.metadata.duration,
            "resolution": self.metadata.resolution,
            "fps": self.metadata.frame_rate,
            "videoType": self.context.video_type,
            "mood": self.context.mood,
            "hookType": self.hook_analysis.type.value,
            "hookStrength": self.hook_analysis.strength.value,
            "hookConfidence": self.hook_analysis.confidence,
            "framesAnalyzed": len(self.visual_analysis),
            "timingPatterns": len(self.timing_patterns),
        }
