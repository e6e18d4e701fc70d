from typing import Dict, Optional


class HookScopeException(Exception):
    """Base exception for HookScope."""

    def __init__(self, message: str, error_code: str = None, details: Dict = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ProviderException(HookScopeException):
    """Raised when external provider fails."""
    pass


class QuotaExceededException(ProviderException):
    """Raised when a provider rejects a call because the credential pool is exhausted."""
    pass


class AuthenticationException(ProviderException):
    """Raised when authentication fails."""
    pass


class MalformedResponseException(ProviderException):
    """Raised when a provider answers with something that cannot be parsed."""
    pass


class ConfigurationException(HookScopeException):
    """Raised when configuration is invalid."""
    pass


class ValidationException(HookScopeException):
    """Raised when input validation fails."""
    pass


class PipelineException(HookScopeException):
    """Fatal pipeline error. Aborts the run after cleanup."""

    stage: str = "pipeline"

    def __init__(self, message: str, error_code: str = None, details: Dict = None, stage: Optional[str] = None):
        super().__init__(message, error_code=error_code or self.__class__.__name__, details=details)
        if stage is not None:
            self.stage = stage


class AcquisitionError(PipelineException):
    """Raised when the source video cannot be fetched or copied."""
    stage = "acquiring"


class ProbeError(PipelineException):
    """Raised when the video file has no decodable video stream."""
    stage = "probing"


class ExtractionError(PipelineException):
    """Raised when an audio track cannot be produced."""
    stage = "extracting"


class SamplingError(PipelineException):
    """Raised when frames cannot be sampled from a fundamentally undecodable file."""
    stage = "extracting"


class PipelineTimeoutError(PipelineException):
    """Raised when a run exceeds its wall-clock budget."""
    stage = "timeout"
