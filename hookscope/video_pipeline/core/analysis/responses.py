"""
Schema validation for inference provider output.

Provider output is untrusted text. Each stage gets one parse-and-coerce
function that returns a fully-defaulted record: every field is validated and
defaulted on its own, so one bad field never discards the others.
"""

import json
import re
import math
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from hookscope.exceptions import MalformedResponseException
from hookscope.video_pipeline.core.analysis.models import (
    ContextAnalysis,
    FrameAnalysis,
    HookAnalysis,
    HookStrength,
    HookType,
    Pacing,
)

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    if text is None:
        return ""
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_payload(text: Optional[str]) -> Dict[str, Any]:
    """
    Decode a provider answer into a JSON object.

    Raises:
        MalformedResponseException: If the text is empty, not JSON, or not an object.
    """
    cleaned = strip_code_fence(text or "")
    if not cleaned:
        raise MalformedResponseException("Empty response from provider")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        # Some models wrap the object in prose; fall back to the outermost braces.
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise MalformedResponseException(f"Response is not JSON: {e}") from e
        try:
            data = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as inner:
            raise MalformedResponseException(f"Response is not JSON: {inner}") from inner
    if not isinstance(data, dict):
        raise MalformedResponseException(f"Expected a JSON object, got {type(data).__name__}")
    return data


def coerce_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def coerce_optional_str_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    return coerce_str_list(value)


def coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def coerce_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("s"))
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def coerce_choice(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip().lower() or None


Text = Annotated[str, BeforeValidator(coerce_text)]
StrList = Annotated[List[str], BeforeValidator(coerce_str_list)]
OptionalStrList = Annotated[Optional[List[str]], BeforeValidator(coerce_optional_str_list)]
Number = Annotated[Optional[float], BeforeValidator(coerce_float)]
Choice = Annotated[Optional[str], BeforeValidator(coerce_choice)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class FramePayload(_Payload):
    description: Text = ""
    objects: StrList = []
    colors: StrList = []
    composition: Text = ""
    actions: StrList = []


class HookPayload(_Payload):
    timestamp: Number = None
    type: Choice = None
    strength: Choice = None
    description: Text = ""
    key_elements: StrList = []
    replication_tips: StrList = []
    visual_cues: OptionalStrList = None
    audio_cues: OptionalStrList = None
    confidence: Number = None


class ContextPayload(_Payload):
    video_type: Text = ""
    style: Text = ""
    pacing: Choice = None
    hooks: StrList = []
    dominant_colors: StrList = []
    mood: Text = ""
    target_audience: Text = ""


def _enum_or_default(enum_cls, value: Optional[str], default):
    try:
        return enum_cls(value) if value else default
    except ValueError:
        return default


def parse_frame_analysis(text: Optional[str], timestamp_seconds: float) -> FrameAnalysis:
    """
    Raises:
        MalformedResponseException: If the answer is not a JSON object at all.
    """
    payload = FramePayload.model_validate(parse_json_payload(text))
    return FrameAnalysis(
        timestamp_seconds=timestamp_seconds,
        description=payload.description,
        objects=payload.objects,
        colors=payload.colors,
        composition=payload.composition,
        actions=payload.actions,
    )


DEFAULT_HOOK_CONFIDENCE = 0.7


def parse_hook_analysis(text: Optional[str], window_end_seconds: float) -> HookAnalysis:
    """
    Missing or invalid fields fall back to a visual, medium-strength hook at
    0s with 0.7 confidence. The timestamp is clamped into the opening window.

    Raises:
        MalformedResponseException: If the answer is not a JSON object at all.
    """
    payload = HookPayload.model_validate(parse_json_payload(text))

    timestamp = payload.timestamp if payload.timestamp is not None else 0.0
    timestamp = min(max(timestamp, 0.0), window_end_seconds)

    confidence = payload.confidence
    if confidence is None or not 0.0 <= confidence <= 1.0:
        confidence = DEFAULT_HOOK_CONFIDENCE

    return HookAnalysis(
        timestamp_seconds=timestamp,
        type=_enum_or_default(HookType, payload.type, HookType.VISUAL),
        strength=_enum_or_default(HookStrength, payload.strength, HookStrength.MEDIUM),
        description=payload.description or "Opening-window hook",
        key_elements=payload.key_elements,
        replication_tips=payload.replication_tips,
        visual_cues=payload.visual_cues,
        audio_cues=payload.audio_cues,
        confidence=confidence,
    )


def parse_context_analysis(text: Optional[str]) -> ContextAnalysis:
    """
    Raises:
        MalformedResponseException: If the answer is not a JSON object at all.
    """
    payload = ContextPayload.model_validate(parse_json_payload(text))
    return ContextAnalysis(
        video_type=payload.video_type or "unknown",
        style=payload.style or "standard",
        pacing=_enum_or_default(Pacing, payload.pacing, Pacing.MEDIUM),
        hooks=payload.hooks,
        dominant_colors=payload.dominant_colors,
        mood=payload.mood or "neutral",
        target_audience=payload.target_audience or "general",
    )
