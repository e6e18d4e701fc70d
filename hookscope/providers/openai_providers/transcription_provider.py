from typing import Dict, Any, Optional

import aiofiles
from loguru import logger
from openai import AsyncOpenAI

from hookscope.exceptions import ProviderException, ConfigurationException, QuotaExceededException, AuthenticationException
from hookscope.providers.base import TranscriptionProvider
from hookscope.providers.credentials import Credential
from hookscope.utils.error_handler import ErrorHandler, handle_exceptions


class OpenAITranscriptionProvider(TranscriptionProvider):
    """OpenAI Whisper transcription provider implementation."""

    def __init__(self, config: Dict[str, Any], credential: Optional[Credential] = None):
        self.config = config
        self.credential = credential
        self.owner_tag = credential.owner_tag if credential else None
        self.client = self._initialize_client()

    def _initialize_client(self):
        """Initialize OpenAI client."""
        api_key = (self.credential.api_key if self.credential else None) or self.config.get("api_key")
        if not api_key:
            raise ConfigurationException("OpenAI API key is required")

        try:
            return AsyncOpenAI(
                api_key=api_key,
                base_url=self.credential.endpoint if self.credential and self.credential.endpoint else None,
                timeout=self.config.get("timeout", 200),
                max_retries=self.config.get("max_retries", 2)
            )
        except Exception as e:
            raise ProviderException(f"Failed to initialize OpenAI client: {e}")

    @handle_exceptions(retries=2, exceptions=(ProviderException,), give_up_on=(QuotaExceededException, AuthenticationException))
    async def transcribe_file(self, audio_path: str, language: str = None, **kwargs) -> str:
        """Transcribe audio file using OpenAI Whisper."""
        try:
            model = self.config.get("model_name", "whisper-1")
            async with aiofiles.open(audio_path, "rb") as f:
                audio_bytes = await f.read()

            request = {"model": model, "file": ("audio.mp3", audio_bytes)}
            if language:
                request["language"] = language
            response = await self.client.audio.transcriptions.create(**request, **kwargs)
            return response.text
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "openai-whisper", self.owner_tag) from e

    async def close(self):
        if self.client:
            logger.info("Closing OpenAI transcription client")
            await self.client.close()
