import pytest

from hookscope.config import CredentialConfig
from hookscope.exceptions import ConfigurationException
from hookscope.providers.credentials import Credential, EnvCredentialResolver, StaticCredentialResolver


def test_env_default_pool(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-default")
    monkeypatch.delenv("OPENAI_ENDPOINT", raising=False)

    credential = EnvCredentialResolver(CredentialConfig()).resolve(None)

    assert credential.owner_tag == "default"
    assert credential.api_key == "sk-default"
    assert credential.endpoint is None


def test_env_tagged_pool(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY_SERGIO", "sk-sergio")
    monkeypatch.setenv("OPENAI_ENDPOINT_SERGIO", "https://sergio.example.com/v1")

    credential = EnvCredentialResolver(CredentialConfig()).resolve("sergio")

    assert credential.owner_tag == "sergio"
    assert credential.api_key == "sk-sergio"
    assert credential.endpoint == "https://sergio.example.com/v1"


def test_env_missing_pool_raises(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY_RUBEN", raising=False)

    with pytest.raises(ConfigurationException) as excinfo:
        EnvCredentialResolver(CredentialConfig()).resolve("ruben")

    assert excinfo.value.error_code == "MISSING_CREDENTIAL"
    assert "OPENAI_API_KEY_RUBEN" in str(excinfo.value)


def test_static_resolver(credential_resolver):
    assert credential_resolver.resolve("").owner_tag == "default"
    assert credential_resolver.resolve("sergio").api_key == "sk-sergio"
    with pytest.raises(ConfigurationException):
        credential_resolver.resolve("ruben")


def test_credential_repr_masks_key():
    assert "sk-secret" not in repr(Credential(owner_tag="x", api_key="sk-secret"))


def test_static_resolver_custom_default():
    resolver = StaticCredentialResolver({"team": Credential(owner_tag="team", api_key="k")}, default_owner="team")
    assert resolver.resolve(None).owner_tag == "team"
