"""Provider system for HookScope."""

from .base import (
    LLMProvider,
    VisionProvider,
    TranscriptionProvider,
)
from .credentials import (
    Credential,
    CredentialResolver,
    EnvCredentialResolver,
    StaticCredentialResolver,
)
from .factory import ProviderFactory, provider_factory

__all__ = [
    'LLMProvider',
    'VisionProvider',
    'TranscriptionProvider',
    'Credential',
    'CredentialResolver',
    'EnvCredentialResolver',
    'StaticCredentialResolver',
    'ProviderFactory',
    'provider_factory',
]
