"""
Turns an AnalysisResult into the request handed to a text-to-video
generation job. Pure; submitting and polling the job is the caller's concern.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hookscope.video_pipeline.core.analysis.models import AnalysisResult, VideoMetadata

KEY_MOMENT_LIMIT = 5
TIMELINE_SEGMENT_LIMIT = 3

LANGUAGE_NAMES = {
    "es": "SPANISH (español)",
    "en": "ENGLISH",
    "pt": "PORTUGUESE (português)",
    "fr": "FRENCH (français)",
}


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    duration_seconds: int
    aspect_ratio: str
    language: str
    key_moments: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt,
            "duration": self.duration_seconds,
            "aspectRatio": self.aspect_ratio,
            "language": self.language,
            "keyMoments": list(self.key_moments),
        }


def aspect_ratio(metadata: VideoMetadata) -> str:
    return "9:16" if metadata.is_vertical else "16:9"


def default_main_prompt(result: AnalysisResult) -> str:
    context = result.context
    return (
        f"Recreate a {context.pacing.value}-paced {context.video_type} video in a {context.style} style "
        f"with a {context.mood} mood. Open with a {result.hook_analysis.strength.value} "
        f"{result.hook_analysis.type.value} hook: {result.hook_analysis.description}"
    )


def build_enriched_prompt(result: AnalysisResult, main_prompt: str, language: str = "es") -> str:
    context = result.context
    language_name = LANGUAGE_NAMES.get(language, language.upper())

    key_moments = "\n".join(
        f"{i + 1}. [{frame.timestamp_seconds:g}s] {frame.description}"
        for i, frame in enumerate(result.visual_analysis[:KEY_MOMENT_LIMIT])
    )
    narrative = "\n".join(
        f"{i + 1}. {segment.description}" for i, segment in enumerate(result.timeline[:TIMELINE_SEGMENT_LIMIT])
    )

    return f"""{main_prompt}

IMPORTANT LANGUAGE REQUIREMENT:
- All spoken dialogue, narration, and on-screen text MUST be in {language_name}.
- Any text overlays, captions, or written content should be in the same language.
- Character speech and voice-overs must be in the same language.

CONTEXT FROM ORIGINAL VIDEO:
Audio Transcription: "{result.transcription}"

Visual Style & Mood:
- Video Type: {context.video_type}
- Style: {context.style}
- Pacing: {context.pacing.value}
- Mood: {context.mood}
- Dominant Colors: {', '.join(context.dominant_colors)}

Key Visual Moments:
{key_moments}

Narrative Flow:
{narrative}

Target Audience: {context.target_audience}

CREATE A VIDEO that captures these elements while ensuring ALL TEXT AND DIALOGUE IS IN {language_name}."""


def build_generation_request(
    result: AnalysisResult,
    main_prompt: Optional[str] = None,
    language: str = "es",
) -> GenerationRequest:
    """
    Args:
        result: A completed analysis
        main_prompt: Creative direction written by the user; derived from the analysis when omitted
        language: Language every line of dialogue and on-screen text must use

    Returns:
        GenerationRequest
    """
    prompt = build_enriched_prompt(result, main_prompt or default_main_prompt(result), language)
    return GenerationRequest(
        prompt=prompt,
        duration_seconds=max(1, round(result.metadata.duration)),
        aspect_ratio=aspect_ratio(result.metadata),
        language=language,
        key_moments=[f.description for f in result.visual_analysis[:KEY_MOMENT_LIMIT]],
    )
