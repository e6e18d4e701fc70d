import tempfile
from typing import List, Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _settings_config(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False,
    )


class LLMConfig(BaseSettings):
    """LLM and vision provider configuration (LLM_* variables)."""

    provider: str = Field(default="openai")
    endpoint: Optional[str] = Field(default=None)
    api_version: str = Field(default="2024-08-01-preview")
    model_name: str = Field(default="gpt-4o")
    vision_model_name: str = Field(default="gpt-4o")
    use_managed_identity: bool = Field(default=False)
    api_key: Optional[str] = Field(default=None)
    timeout: int = Field(default=200)
    max_retries: int = Field(default=2)
    temperature: float = Field(default=0.0)

    model_config = _settings_config("LLM_")

    def __init__(self, **kwargs):
        # Force load environment variables before validation
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)


class TranscriptionConfig(BaseSettings):
    """Speech-to-text provider configuration (TRANSCRIPTION_* variables)."""

    provider: str = Field(default="openai")
    model_name: str = Field(default="whisper-1")
    language: str = Field(default="es")
    endpoint: Optional[str] = Field(default=None)
    api_version: str = Field(default="2024-08-01-preview")
    use_managed_identity: bool = Field(default=False)
    api_key: Optional[str] = Field(default=None)
    timeout: int = Field(default=200)
    max_retries: int = Field(default=2)

    model_config = _settings_config("TRANSCRIPTION_")

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)


class PipelineConfig(BaseSettings):
    """Sampling, concurrency and budget settings for one analysis run (PIPELINE_* variables)."""

    work_root: str = Field(default_factory=tempfile.gettempdir)
    frame_interval_seconds: float = Field(default=2.0, gt=0)
    window_end_seconds: float = Field(default=3.0, gt=0)
    window_step_seconds: float = Field(default=0.5, gt=0)
    frame_concurrency: int = Field(default=4, ge=1, le=8)
    timeout_seconds: float = Field(default=300.0, gt=0)
    frame_max_width: int = Field(default=1280, gt=0)
    max_download_mb: int = Field(default=500, gt=0)
    download_timeout_seconds: int = Field(default=120, gt=0)
    allowed_domains: str = Field(default="")

    model_config = _settings_config("PIPELINE_")

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)

    @field_validator("allowed_domains", mode="before")
    @classmethod
    def _join_domains(cls, value):
        if isinstance(value, (list, tuple)):
            return ",".join(value)
        return value

    @property
    def allowed_domain_list(self) -> List[str]:
        """PIPELINE_ALLOWED_DOMAINS as a list; empty means any domain."""
        return [d.strip() for d in self.allowed_domains.split(",") if d.strip()]


class CredentialConfig(BaseSettings):
    """
    Credential pool layout (CREDENTIAL_* variables).

    The default pool reads `<key_env_prefix>`; a tagged pool reads
    `<key_env_prefix>_<TAG>`, e.g. OPENAI_API_KEY_SERGIO.
    """

    key_env_prefix: str = Field(default="OPENAI_API_KEY")
    endpoint_env_prefix: str = Field(default="OPENAI_ENDPOINT")
    default_owner: str = Field(default="default")

    model_config = _settings_config("CREDENTIAL_")

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    enable_file_logging: bool = Field(default=False)
    max_file_size: str = Field(default="10 MB")
    retention_days: int = Field(default=7)

    model_config = _settings_config("LOG_")


class HookScopeConfig(BaseSettings):
    """Main configuration class."""

    app_name: str = Field(default="HookScope")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    _llm: Optional[LLMConfig] = PrivateAttr(default=None)
    _transcription: Optional[TranscriptionConfig] = PrivateAttr(default=None)
    _pipeline: Optional[PipelineConfig] = PrivateAttr(default=None)
    _credentials: Optional[CredentialConfig] = PrivateAttr(default=None)
    _logging: Optional[LoggingConfig] = PrivateAttr(default=None)

    def __init__(self, **kwargs):
        # Force load environment variables before initializing
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)

    @property
    def llm(self) -> LLMConfig:
        if self._llm is None:
            self._llm = LLMConfig()
        return self._llm

    @property
    def transcription(self) -> TranscriptionConfig:
        if self._transcription is None:
            self._transcription = TranscriptionConfig()
        return self._transcription

    @property
    def pipeline(self) -> PipelineConfig:
        if self._pipeline is None:
            self._pipeline = PipelineConfig()
        return self._pipeline

    @property
    def credentials(self) -> CredentialConfig:
        if self._credentials is None:
            self._credentials = CredentialConfig()
        return self._credentials

    @property
    def logging(self) -> LoggingConfig:
        if self._logging is None:
            self._logging = LoggingConfig()
        return self._logging
