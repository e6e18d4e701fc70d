from typing import Dict, Any, Optional

import aiofiles
from loguru import logger

from hookscope.exceptions import ConfigurationException, ProviderException, QuotaExceededException, AuthenticationException
from hookscope.providers.azure_providers.client import build_azure_client
from hookscope.providers.base import TranscriptionProvider
from hookscope.providers.credentials import Credential
from hookscope.utils.error_handler import ErrorHandler, handle_exceptions


class WhisperTranscriptionProvider(TranscriptionProvider):
    """Azure OpenAI Whisper deployment."""

    def __init__(self, config: Dict[str, Any], credential: Optional[Credential] = None):
        self.config = config
        self.owner_tag = credential.owner_tag if credential else None
        self.client = build_azure_client(config, credential)

    @handle_exceptions(retries=2, exceptions=(ProviderException,), give_up_on=(QuotaExceededException, AuthenticationException))
    async def transcribe_file(self, audio_path: str, language: str = None, **kwargs) -> str:
        deployment_name = self.config.get("model_name")
        if not deployment_name:
            raise ConfigurationException("Azure Whisper deployment name is required")
        try:
            async with aiofiles.open(audio_path, "rb") as f:
                audio_bytes = await f.read()
            request = {"model": deployment_name, "file": ("audio.mp3", audio_bytes)}
            if language:
                request["language"] = language
            response = await self.client.audio.transcriptions.create(**request, **kwargs)
            return response.text
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "azure-whisper", self.owner_tag) from e

    async def close(self):
        if self.client:
            logger.info("Closing Azure Whisper client")
            await self.client.close()
