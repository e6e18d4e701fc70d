from typing import Dict, Any, List, Optional

from loguru import logger
from openai import AsyncOpenAI

from hookscope.exceptions import ProviderException, ConfigurationException, QuotaExceededException, AuthenticationException
from hookscope.providers.base import LLMProvider
from hookscope.providers.credentials import Credential
from hookscope.utils.error_handler import ErrorHandler, handle_exceptions


class OpenAILLMProvider(LLMProvider):
    """OpenAI LLM provider implementation."""

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
    async def chat_completion(self, messages: List[Dict], **kwargs) -> Dict[str, Any]:
        """Generate chat completion using OpenAI."""
        try:
            model = kwargs.pop("model", None) or self.config.get("model_name", "gpt-4o")
            temperature = kwargs.pop("temperature", self.config.get("temperature", 0.0))
            max_tokens = kwargs.pop("max_tokens", 4000)

            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs
            )

            return {
                "content": response.choices[0].message.content,
                "usage": response.usage.model_dump() if response.usage else None,
                "model": response.model,
                "finish_reason": response.choices[0].finish_reason
            }
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "openai", self.owner_tag) from e

    async def close(self):
        """Close the LLM client and cleanup resources."""
        if self.client:
            logger.info("Closing OpenAI LLM client")
            await self.client.close()
