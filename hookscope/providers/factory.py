from typing import Dict, Optional, Type
from loguru import logger

from .base import (
    LLMProvider,
    VisionProvider,
    TranscriptionProvider,
)
from .azure_providers import (
    AzureLLMProvider,
    AzureVisionProvider,
    WhisperTranscriptionProvider,
)
from .openai_providers import (
    OpenAILLMProvider,
    OpenAIVisionProvider,
    OpenAITranscriptionProvider,
)
from .credentials import Credential
from ..config.settings import HookScopeConfig
from ..exceptions import ConfigurationException


class ProviderFactory:
    """Factory class for creating provider instances."""

    _llm_providers: Dict[str, Type[LLMProvider]] = {
        'azure': AzureLLMProvider,
        'openai': OpenAILLMProvider,
    }

    _vision_providers: Dict[str, Type[VisionProvider]] = {
        'azure': AzureVisionProvider,
        'openai': OpenAIVisionProvider,
    }

    _transcription_providers: Dict[str, Type[TranscriptionProvider]] = {
        'azure': WhisperTranscriptionProvider,
        'openai': OpenAITranscriptionProvider,
    }

    @staticmethod
    def _lookup(registry: Dict[str, Type], kind: str, provider_name: str) -> Type:
        if provider_name not in registry:
            raise ConfigurationException(
                f"Unknown {kind} provider: {provider_name}. "
                f"Supported providers: {list(registry.keys())}"
            )
        return registry[provider_name]

    @classmethod
    def create_llm_provider(
        cls,
        provider_name: Optional[str] = None,
        credential: Optional[Credential] = None,
        config: Optional[HookScopeConfig] = None,
    ) -> LLMProvider:
        """
        Create LLM provider instance.

        Args:
            provider_name: Name of the provider (optional, defaults to config)
            credential: Credential pool to bill the calls to
            config: Configuration to read provider settings from

        Returns:
            LLMProvider instance

        Raises:
            ConfigurationException: If provider is not supported
        """
        config = config or HookScopeConfig()
        provider_name = provider_name or config.llm.provider
        provider_class = cls._lookup(cls._llm_providers, "LLM", provider_name)
        logger.info(f"Creating LLM provider: {provider_name}")
        return provider_class(config.llm.model_dump(), credential)

    @classmethod
    def create_vision_provider(
        cls,
        provider_name: Optional[str] = None,
        credential: Optional[Credential] = None,
        config: Optional[HookScopeConfig] = None,
    ) -> VisionProvider:
        """Create vision provider instance. Vision shares the LLM settings block."""
        config = config or HookScopeConfig()
        provider_name = provider_name or config.llm.provider
        provider_class = cls._lookup(cls._vision_providers, "vision", provider_name)
        logger.info(f"Creating vision provider: {provider_name}")
        return provider_class(config.llm.model_dump(), credential)

    @classmethod
    def create_transcription_provider(
        cls,
        provider_name: Optional[str] = None,
        credential: Optional[Credential] = None,
        config: Optional[HookScopeConfig] = None,
    ) -> TranscriptionProvider:
        """Create transcription provider instance."""
        config = config or HookScopeConfig()
        provider_name = provider_name or config.transcription.provider
        provider_class = cls._lookup(cls._transcription_providers, "transcription", provider_name)
        logger.info(f"Creating transcription provider: {provider_name}")
        return provider_class(config.transcription.model_dump(), credential)

    @classmethod
    def register_llm_provider(cls, name: str, provider_class: Type[LLMProvider]):
        """Register a new LLM provider."""
        cls._llm_providers[name] = provider_class
        logger.info(f"Registered LLM provider: {name}")

    @classmethod
    def register_vision_provider(cls, name: str, provider_class: Type[VisionProvider]):
        """Register a new vision provider."""
        cls._vision_providers[name] = provider_class
        logger.info(f"Registered vision provider: {name}")

    @classmethod
    def register_transcription_provider(cls, name: str, provider_class: Type[TranscriptionProvider]):
        """Register a new transcription provider."""
        cls._transcription_providers[name] = provider_class
        logger.info(f"Registered transcription provider: {name}")


# Global provider factory instance
provider_factory = ProviderFactory()
