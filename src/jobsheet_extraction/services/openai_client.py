"""
OpenAI client factory for the LLM fallback strategy.

Uses Azure OpenAI when its credentials are present, the public API otherwise.

Environment variables:
    # Azure OpenAI (preferred when available)
    AZURE_OPENAI_API_KEY      - Azure OpenAI API key
    AZURE_OPENAI_ENDPOINT     - Endpoint (e.g., https://xxx.openai.azure.com/)
    AZURE_OPENAI_BASE_URL     - Alternative to ENDPOINT (…/openai/v1/ suffix is stripped)
    AZURE_OPENAI_API_VERSION  - API version (default: 2024-02-15-preview)
    AZURE_OPENAI_DEPLOYMENT   - Deployment name used as the model

    # Standard OpenAI (fallback)
    OPENAI_API_KEY            - OpenAI API key
    OPENAI_MODEL              - Model name (default: gpt-4o-mini)
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-02-15-preview"
DEFAULT_DEPLOYMENT = "gpt-4o"
DEFAULT_MODEL = "gpt-4o-mini"


def _get_azure_endpoint() -> Optional[str]:
    """Get and normalize the Azure OpenAI endpoint."""
    endpoint = os.getenv("AZURE_OPENAI_ENDPOINT") or os.getenv("AZURE_OPENAI_BASE_URL")
    if not endpoint:
        return None

    endpoint = endpoint.rstrip("/")
    for suffix in ("/openai/v1", "/openai"):
        if endpoint.endswith(suffix):
            return endpoint[: -len(suffix)]
    return endpoint


def is_azure_openai_configured() -> bool:
    """Check if Azure OpenAI credentials are configured."""
    return bool(os.getenv("AZURE_OPENAI_API_KEY") and _get_azure_endpoint())


def get_openai_client(api_key: Optional[str] = None, timeout: Optional[float] = None):
    """
    Create an OpenAI client, using Azure OpenAI if configured.

    Args:
        api_key: Optional API key override for the public API.
        timeout: Optional request timeout in seconds.

    Returns:
        OpenAI or AzureOpenAI client instance.

    Raises:
        ValueError: If no valid credentials are found.
    """
    azure_api_key = os.getenv("AZURE_OPENAI_API_KEY")
    azure_endpoint = _get_azure_endpoint()
    client_kwargs = {"timeout": timeout} if timeout is not None else {}

    if azure_api_key and azure_endpoint:
        from openai import AzureOpenAI

        logger.debug(f"Creating AzureOpenAI client with endpoint: {azure_endpoint[:30]}...")
        return AzureOpenAI(
            api_key=azure_api_key,
            api_version=os.getenv("AZURE_OPENAI_API_VERSION", DEFAULT_API_VERSION),
            azure_endpoint=azure_endpoint,
            **client_kwargs,
        )

    standard_api_key = api_key or os.getenv("OPENAI_API_KEY")
    if standard_api_key:
        from openai import OpenAI

        logger.debug("Creating standard OpenAI client")
        return OpenAI(api_key=standard_api_key, **client_kwargs)

    raise ValueError(
        "No OpenAI credentials found. Set either:\n"
        "  - AZURE_OPENAI_API_KEY + AZURE_OPENAI_ENDPOINT (for Azure OpenAI)\n"
        "  - OPENAI_API_KEY (for standard OpenAI)"
    )


def get_default_model() -> str:
    """Deployment name on Azure, model name on the public API."""
    if is_azure_openai_configured():
        return os.getenv("AZURE_OPENAI_DEPLOYMENT", DEFAULT_DEPLOYMENT)
    return os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
