"""
Credential pools for the inference providers.

A run is tagged with an owner; the tag selects which API key pool pays for
the run's inference calls. Resolution is a stateless lookup so resolvers can
be swapped per deployment (environment variables, a fixed mapping in tests).
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from azure.identity.aio import (
    DefaultAzureCredential as AsyncDefaultAzureCredential,
    AzureCliCredential as AsyncAzureCliCredential,
    ChainedTokenCredential as AsyncChainedTokenCredential
)
from dotenv import load_dotenv, find_dotenv
from loguru import logger

from hookscope.config.settings import CredentialConfig
from hookscope.exceptions import ConfigurationException


@dataclass(frozen=True)
class Credential:
    """API credential for one owner's pool."""

    owner_tag: str
    api_key: Optional[str] = None
    endpoint: Optional[str] = None
    use_managed_identity: bool = False

    def __repr__(self) -> str:
        masked = "***" if self.api_key else None
        return f"Credential(owner_tag={self.owner_tag!r}, api_key={masked!r}, endpoint={self.endpoint!r})"


class CredentialResolver(ABC):
    """Maps an owner tag to the credential whose quota pays for the run."""

    @abstractmethod
    def resolve(self, owner_tag: Optional[str] = None) -> Credential:
        pass


class EnvCredentialResolver(CredentialResolver):
    """
    Reads credential pools from environment variables.

    With the default CredentialConfig the untagged pool is OPENAI_API_KEY and
    the pool for tag "sergio" is OPENAI_API_KEY_SERGIO.
    """

    def __init__(self, config: Optional[CredentialConfig] = None):
        load_dotenv(find_dotenv())
        self.config = config or CredentialConfig()

    def _env_name(self, prefix: str, owner_tag: Optional[str]) -> str:
        if not owner_tag or owner_tag == self.config.default_owner:
            return prefix
        return f"{prefix}_{owner_tag.upper()}"

    def resolve(self, owner_tag: Optional[str] = None) -> Credential:
        tag = owner_tag or self.config.default_owner
        key_env = self._env_name(self.config.key_env_prefix, owner_tag)
        api_key = os.getenv(key_env)
        if not api_key:
            raise ConfigurationException(
                f"API key not configured for '{tag}'. Set {key_env}.",
                error_code="MISSING_CREDENTIAL",
                details={"owner_tag": tag, "env_var": key_env},
            )
        endpoint = os.getenv(self._env_name(self.config.endpoint_env_prefix, owner_tag))
        logger.debug(f"Resolved credential pool '{tag}' from {key_env}")
        return Credential(owner_tag=tag, api_key=api_key, endpoint=endpoint)


class StaticCredentialResolver(CredentialResolver):
    """Resolves from a fixed mapping; an empty tag selects the default pool."""

    def __init__(self, credentials: Dict[str, Credential], default_owner: str = "default"):
        self.credentials = dict(credentials)
        self.default_owner = default_owner

    def resolve(self, owner_tag: Optional[str] = None) -> Credential:
        tag = owner_tag or self.default_owner
        credential = self.credentials.get(tag)
        if credential is None:
            raise ConfigurationException(
                f"No credential registered for '{tag}'",
                error_code="MISSING_CREDENTIAL",
                details={"owner_tag": tag},
            )
        return credential


class AzureCredentials:
    """Token credentials for Azure OpenAI deployments using managed identity."""

    @staticmethod
    def get_async_credentials():
        """
        Uses ChainedTokenCredential to try CLI first, then fallback to DefaultAzureCredential.

        Returns:
            AsyncChainedTokenCredential with CLI and DefaultAzureCredential
        """
        return AsyncChainedTokenCredential(
            AsyncAzureCliCredential(),
            AsyncDefaultAzureCredential()
        )
