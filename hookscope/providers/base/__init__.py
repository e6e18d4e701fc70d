from .llm_provider import LLMProvider
from .transcription_provider import TranscriptionProvider
from .vision_provider import VisionProvider, build_image_message

__all__ = [
    'LLMProvider',
    'VisionProvider',
    'TranscriptionProvider',
    'build_image_message',
]
