from typing import Dict, Any, List, Optional

from loguru import logger

from hookscope.exceptions import ConfigurationException, ProviderException, QuotaExceededException, AuthenticationException
from hookscope.providers.azure_providers.client import build_azure_client
from hookscope.providers.base import VisionProvider, build_image_message
from hookscope.providers.credentials import Credential
from hookscope.utils.error_handler import ErrorHandler, handle_exceptions


class AzureVisionProvider(VisionProvider):
    """Azure OpenAI vision provider implementation (GPT-4o deployments)."""

    def __init__(self, config: Dict[str, Any], credential: Optional[Credential] = None):
        self.config = config
        self.owner_tag = credential.owner_tag if credential else None
        self.client = build_azure_client(config, credential)

    @handle_exceptions(retries=2, exceptions=(ProviderException,), give_up_on=(QuotaExceededException, AuthenticationException))
    async def analyze_images(self, images: List[bytes], prompt: str, **kwargs) -> Dict[str, Any]:
        deployment_name = self.config.get("vision_model_name") or self.config.get("model_name")
        if not deployment_name:
            raise ConfigurationException("Azure OpenAI vision deployment name is required")
        try:
            response = await self.client.chat.completions.create(
                model=deployment_name,
                messages=[build_image_message(prompt, images, kwargs.get("detail", "auto"))],
                max_tokens=kwargs.get("max_tokens", 1000),
                temperature=kwargs.get("temperature", 0.0)
            )
            return {
                "analysis": response.choices[0].message.content,
                "model": response.model,
                "usage": response.usage.model_dump() if response.usage else None
            }
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "azure-vision", self.owner_tag) from e

    async def close(self):
        if self.client:
            logger.info("Closing Azure OpenAI vision client")
            await self.client.close()
