from typing import Dict, Any, List, Optional

from loguru import logger
from openai import AsyncOpenAI

from hookscope.exceptions import ProviderException, ConfigurationException, QuotaExceededException, AuthenticationException
from hookscope.providers.base import VisionProvider, build_image_message
from hookscope.providers.credentials import Credential
from hookscope.utils.error_handler import ErrorHandler, handle_exceptions


class OpenAIVisionProvider(VisionProvider):
    """OpenAI Vision provider implementation."""

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
    async def analyze_images(self, images: List[bytes], prompt: str, **kwargs) -> Dict[str, Any]:
        """Analyze images using OpenAI Vision."""
        try:
            model = self.config.get("vision_model_name", "gpt-4o")
            messages = [build_image_message(prompt, images, kwargs.get("detail", "auto"))]

            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=kwargs.get("max_tokens", 1000),
                temperature=kwargs.get("temperature", 0.0)
            )

            return {
                "analysis": response.choices[0].message.content,
                "model": response.model,
                "usage": response.usage.model_dump() if response.usage else None
            }
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "openai-vision", self.owner_tag) from e

    async def close(self):
        if self.client:
            logger.info("Closing OpenAI vision client")
            await self.client.close()
