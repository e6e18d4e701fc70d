from .settings import (
    HookScopeConfig,
    LLMConfig,
    TranscriptionConfig,
    PipelineConfig,
    CredentialConfig,
    LoggingConfig,
)

__all__ = [
    "HookScopeConfig",
    "LLMConfig",
    "TranscriptionConfig",
    "PipelineConfig",
    "CredentialConfig",
    "LoggingConfig",
]
