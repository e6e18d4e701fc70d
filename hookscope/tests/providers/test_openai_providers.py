from types import SimpleNamespace

import httpx
import openai
import pytest

from hookscope.exceptions import AuthenticationException, ConfigurationException, QuotaExceededException
from hookscope.providers.credentials import Credential
from hookscope.providers.openai_providers import OpenAILLMProvider, OpenAIVisionProvider

CONFIG = {"model_name": "gpt-4o", "vision_model_name": "gpt-4o", "timeout": 5, "max_retries": 0}


def _response(status):
    return httpx.Response(status, request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


def _client_raising(error):
    async def create(**kwargs):
        raise error

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _client_returning(content):
    async def create(**kwargs):
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")],
            usage=None,
            model=kwargs["model"],
        )

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_missing_key_is_configuration_error():
    with pytest.raises(ConfigurationException):
        OpenAILLMProvider(CONFIG, Credential(owner_tag="default"))


async def test_rate_limit_becomes_quota_exception_with_owner():
    provider = OpenAILLMProvider(CONFIG, Credential(owner_tag="sergio", api_key="sk-test"))
    provider.client = _client_raising(
        openai.RateLimitError("You exceeded your current quota", response=_response(429), body=None)
    )

    with pytest.raises(QuotaExceededException) as excinfo:
        await provider.chat_completion([{"role": "user", "content": "hi"}])

    assert excinfo.value.details["owner_tag"] == "sergio"


async def test_bad_key_becomes_authentication_exception():
    provider = OpenAIVisionProvider(CONFIG, Credential(owner_tag="default", api_key="sk-bad"))
    provider.client = _client_raising(
        openai.AuthenticationError("Incorrect API key", response=_response(401), body=None)
    )

    with pytest.raises(AuthenticationException):
        await provider.analyze_images([b"jpeg"], "describe")


async def test_vision_returns_analysis_text():
    provider = OpenAIVisionProvider(CONFIG, Credential(owner_tag="default", api_key="sk-test"))
    provider.client = _client_returning('{"description": "x"}')

    response = await provider.analyze_image(b"jpeg", "describe")

    assert response["analysis"] == '{"description": "x"}'
    assert response["model"] == "gpt-4o"
