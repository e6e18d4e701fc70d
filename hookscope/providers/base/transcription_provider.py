from abc import ABC, abstractmethod


class TranscriptionProvider(ABC):
    """Abstract base class for transcription providers."""

    @abstractmethod
    async def transcribe_file(self, audio_path: str, language: str = None, **kwargs) -> str:
        """Transcribe audio file to text."""
        pass

    async def close(self):
        """Close the provider and cleanup resources."""
        pass
