from typing import Dict, Any, List, Optional

from loguru import logger

from hookscope.exceptions import ConfigurationException, ProviderException, QuotaExceededException, AuthenticationException
from hookscope.providers.azure_providers.client import build_azure_client
from hookscope.providers.base import LLMProvider
from hookscope.providers.credentials import Credential
from hookscope.utils.error_handler import ErrorHandler, handle_exceptions


class AzureLLMProvider(LLMProvider):
    """Azure OpenAI LLM provider implementation."""

    def __init__(self, config: Dict[str, Any], credential: Optional[Credential] = None):
        self.config = config
        self.owner_tag = credential.owner_tag if credential else None
        self.client = build_azure_client(config, credential)

    @handle_exceptions(retries=2, exceptions=(ProviderException,), give_up_on=(QuotaExceededException, AuthenticationException))
    async def chat_completion(self, messages: List[Dict], **kwargs) -> Dict[str, Any]:
        """Generate chat completion using an Azure OpenAI deployment."""
        deployment_name = kwargs.pop("model", None) or self.config.get("model_name")
        if not deployment_name:
            raise ConfigurationException("Azure OpenAI deployment name is required")
        try:
            temperature = kwargs.pop("temperature", self.config.get("temperature", 0.0))
            max_tokens = kwargs.pop("max_tokens", 4000)

            response = await self.client.chat.completions.create(
                model=deployment_name,
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
            raise ErrorHandler.handle_provider_error(e, "azure", self.owner_tag) from e

    async def close(self):
        if self.client:
            logger.info("Closing Azure OpenAI LLM client")
            await self.client.close()
