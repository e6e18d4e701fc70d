import json

import pytest

from hookscope.exceptions import MalformedResponseException
from hookscope.video_pipeline.core.analysis.models import HookStrength, HookType, Pacing
from hookscope.video_pipeline.core.analysis.responses import (
    parse_context_analysis,
    parse_frame_analysis,
    parse_hook_analysis,
    parse_json_payload,
    strip_code_fence,
)


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


def test_json_inside_prose_is_recovered():
    assert parse_json_payload('Here you go: {"mood": "calm"} hope it helps') == {"mood": "calm"}


@pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]"])
def test_unusable_payload_raises(text):
    with pytest.raises(MalformedResponseException):
        parse_json_payload(text)


def test_frame_fields_coerced_independently():
    text = json.dumps({
        "description": "a dog",
        "objects": "dog",
        "colors": ["brown", None, 3],
        "composition": ["wide"],
    })

    frame = parse_frame_analysis(text, 4.0)

    assert frame.timestamp_seconds == 4.0
    assert frame.description == "a dog"
    assert frame.objects == []
    assert frame.colors == ["brown", "3"]
    assert frame.composition == ""
    assert frame.actions == []


def test_hook_defaults_on_invalid_fields():
    text = json.dumps({"type": "telepathy", "strength": 7, "confidence": 3, "timestamp": "9s"})

    hook = parse_hook_analysis(text, window_end_seconds=3.0)

    assert hook.type is HookType.VISUAL
    assert hook.strength is HookStrength.MEDIUM
    assert hook.confidence == 0.7
    assert hook.timestamp_seconds == 3.0
    assert hook.visual_cues is None


def test_hook_camel_case_fields():
    text = json.dumps({
        "type": "Verbal",
        "strength": "extreme",
        "keyElements": ["shout"],
        "replicationTips": ["be loud"],
        "audioCues": ["scream"],
        "confidence": 0.95,
        "timestamp": 1.5,
    })

    hook = parse_hook_analysis(text, window_end_seconds=3.0)

    assert hook.type is HookType.VERBAL
    assert hook.strength is HookStrength.EXTREME
    assert hook.key_elements == ["shout"]
    assert hook.audio_cues == ["scream"]
    assert hook.timestamp_seconds == 1.5


def test_context_named_defaults():
    context = parse_context_analysis('{"hooks": "none", "pacing": "glacial"}')

    assert context.video_type == "unknown"
    assert context.style == "standard"
    assert context.pacing is Pacing.MEDIUM
    assert context.mood == "neutral"
    assert context.target_audience == "general"
    assert context.hooks == []
