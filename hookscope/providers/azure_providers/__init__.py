from .llm_provider import AzureLLMProvider
from .vision_provider import AzureVisionProvider
from .transcription_provider import WhisperTranscriptionProvider

__all__ = [
    'AzureLLMProvider',
    'AzureVisionProvider',
    'WhisperTranscriptionProvider',
]
