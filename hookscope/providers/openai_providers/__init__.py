from .llm_provider import OpenAILLMProvider
from .vision_provider import OpenAIVisionProvider
from .transcription_provider import OpenAITranscriptionProvider

__all__ = [
    'OpenAILLMProvider',
    'OpenAIVisionProvider',
    'OpenAITranscriptionProvider',
]
