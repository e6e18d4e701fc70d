import pytest

from hookscope.exceptions import (
    AuthenticationException,
    ExtractionError,
    ProviderException,
    QuotaExceededException,
    ValidationException,
)
from hookscope.utils.error_handler import ErrorHandler, convert_exceptions, handle_exceptions


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


@pytest.mark.parametrize(
    "error, expected",
    [
        (StatusError("slow down", 429), QuotaExceededException),
        (RuntimeError("Error code: insufficient_quota"), QuotaExceededException),
        (StatusError("forbidden", 403), AuthenticationException),
        (RuntimeError("connection reset"), ProviderException),
    ],
)
def test_provider_errors_are_classified(error, expected):
    converted = ErrorHandler.handle_provider_error(error, "openai", "ruben")

    assert type(converted) is expected
    assert converted.details["owner_tag"] == "ruben"
    assert converted.details["provider"] == "openai"


async def test_retries_then_succeeds():
    attempts = []

    @handle_exceptions(retries=3, exceptions=(ProviderException,), max_delay=0.0)
    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise ProviderException("transient")
        return "ok"

    assert await flaky() == "ok"
    assert len(attempts) == 3


async def test_quota_is_not_retried():
    attempts = []

    @handle_exceptions(retries=3, exceptions=(ProviderException,), give_up_on=(QuotaExceededException,))
    async def exhausted():
        attempts.append(1)
        raise QuotaExceededException("quota")

    with pytest.raises(QuotaExceededException):
        await exhausted()
    assert len(attempts) == 1


async def test_convert_exceptions_maps_and_passes_through():
    @convert_exceptions({OSError: ExtractionError})
    async def broken(error):
        raise error

    with pytest.raises(ExtractionError) as excinfo:
        await broken(FileNotFoundError("ffmpeg"))
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    with pytest.raises(ValidationException):
        await broken(ValidationException("bad input"))
