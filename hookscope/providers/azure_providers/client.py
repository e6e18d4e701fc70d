from typing import Any, Dict, Optional

from azure.identity.aio import get_bearer_token_provider
from openai import AsyncAzureOpenAI

from hookscope.exceptions import ConfigurationException, ProviderException
from hookscope.providers.credentials import AzureCredentials, Credential

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


def build_azure_client(config: Dict[str, Any], credential: Optional[Credential] = None) -> AsyncAzureOpenAI:
    """Create an Azure OpenAI client from provider config, preferring the resolved credential."""
    endpoint = (credential.endpoint if credential else None) or config.get("endpoint")
    api_version = config.get("api_version", "2024-08-01-preview")
    use_managed_identity = (credential.use_managed_identity if credential else False) or config.get(
        "use_managed_identity", False
    )
    timeout = config.get("timeout", 200)
    max_retries = config.get("max_retries", 2)

    if not endpoint:
        raise ConfigurationException("Azure OpenAI endpoint is required")

    try:
        if use_managed_identity:
            token_provider = get_bearer_token_provider(
                AzureCredentials.get_async_credentials(),
                COGNITIVE_SERVICES_SCOPE
            )
            return AsyncAzureOpenAI(
                api_version=api_version,
                azure_endpoint=endpoint,
                azure_ad_token_provider=token_provider,
                max_retries=max_retries,
                timeout=timeout
            )

        api_key = (credential.api_key if credential else None) or config.get("api_key")
        if not api_key:
            raise ConfigurationException("Azure OpenAI API key is required when managed identity is disabled")

        return AsyncAzureOpenAI(
            api_version=api_version,
            azure_endpoint=endpoint,
            api_key=api_key,
            max_retries=max_retries,
            timeout=timeout
        )
    except ConfigurationException:
        raise
    except Exception as e:
        raise ProviderException(f"Failed to initialize Azure OpenAI client: {e}")
