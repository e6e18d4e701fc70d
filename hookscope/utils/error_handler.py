import asyncio
import functools
from typing import TypeVar, Callable, Any, Optional, Type, Union
from loguru import logger
import openai
from ..exceptions import (
    AuthenticationException,
    HookScopeException,
    ProviderException,
    QuotaExceededException,
)

T = TypeVar('T')

_QUOTA_MARKERS = ("insufficient_quota", "quota", "rate limit", "rate_limit")


def handle_exceptions(
    retries: int = 3,
    fallback: Any = None,
    exceptions: Union[Type[Exception], tuple] = Exception,
    give_up_on: Union[Type[Exception], tuple] = (),
    backoff_factor: float = 2.0,
    max_delay: float = 60.0
):
    """
    Decorator for coroutine functions: retry with exponential backoff, then fall back.

    Args:
        retries: Number of retry attempts
        fallback: Fallback value to return if all retries fail
        exceptions: Exception types to catch and retry
        give_up_on: Exception types that are re-raised immediately without retrying
        backoff_factor: Exponential backoff factor
        max_delay: Maximum delay between retries
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            last_exception = None

            for attempt in range(retries):
                try:
                    return await func(*args, **kwargs)
                except give_up_on:
                    raise
                except exceptions as e:
                    last_exception = e

                    if attempt < retries - 1:
                        delay = min(backoff_factor ** attempt, max_delay)
                        logger.warning(f"Attempt {attempt + 1} failed: {e}. Retrying in {delay}s...")
                        await asyncio.sleep(delay)
                    else:
                        logger.error(f"All {retries} attempts failed: {e}")

            if fallback is not None:
                logger.info(f"Returning fallback value: {fallback}")
                return fallback

            raise last_exception

        return async_wrapper

    return decorator


def convert_exceptions(exception_map: dict):
    """
    Decorator for coroutine functions that converts foreign exceptions to HookScope exceptions.

    Exceptions that already belong to the HookScope hierarchy pass through untouched.

    Args:
        exception_map: Dictionary mapping exception types to HookScope exception types
    """
    def _convert(e: Exception):
        if isinstance(e, HookScopeException):
            return None
        for source_exc, target_exc in exception_map.items():
            if isinstance(e, source_exc):
                return target_exc(str(e), details={"original_exception": type(e).__name__})
        return None

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                converted = _convert(e)
                if converted is not None:
                    raise converted from e
                raise

        return async_wrapper

    return decorator


class ErrorHandler:
    """Centralized error handling utilities."""

    @staticmethod
    def is_quota_error(e: Exception) -> bool:
        if isinstance(e, QuotaExceededException):
            return True
        if isinstance(e, openai.RateLimitError):
            return True
        if getattr(e, "status_code", None) == 429:
            return True
        text = str(e).lower()
        return any(marker in text for marker in _QUOTA_MARKERS)

    @staticmethod
    def is_auth_error(e: Exception) -> bool:
        if isinstance(e, AuthenticationException):
            return True
        if isinstance(e, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return True
        return getattr(e, "status_code", None) in (401, 403)

    @staticmethod
    def handle_provider_error(e: Exception, provider_name: str, owner_tag: Optional[str] = None) -> ProviderException:
        """Convert provider-specific exceptions to the matching ProviderException subclass."""
        if isinstance(e, ProviderException):
            e.details.setdefault("provider", provider_name)
            e.details.setdefault("owner_tag", owner_tag)
            return e

        error_details = {
            "provider": provider_name,
            "owner_tag": owner_tag,
            "original_exception": type(e).__name__,
            "message": str(e)
        }

        if ErrorHandler.is_quota_error(e):
            logger.error(f"Provider {provider_name} quota exhausted for '{owner_tag}': {e}")
            return QuotaExceededException(
                f"Provider {provider_name} quota exceeded: {e}",
                error_code="QUOTA_EXCEEDED",
                details=error_details
            )
        if ErrorHandler.is_auth_error(e):
            logger.error(f"Provider {provider_name} rejected credentials for '{owner_tag}': {e}")
            return AuthenticationException(
                f"Provider {provider_name} authentication failed: {e}",
                error_code="AUTH_FAILED",
                details=error_details
            )

        logger.error(f"Provider {provider_name} error: {e}")
        return ProviderException(
            f"Provider {provider_name} failed: {e}",
            error_code="PROVIDER_ERROR",
            details=error_details
        )

