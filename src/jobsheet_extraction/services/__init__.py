"""OpenAI client access for the LLM fallback strategy."""

from jobsheet_extraction.services.llm_client import OpenAIChatClient
from jobsheet_extraction.services.openai_client import (
    get_default_model,
    get_openai_client,
    is_azure_openai_configured,
)

__all__ = [
    "OpenAIChatClient",
    "get_default_model",
    "get_openai_client",
    "is_azure_openai_configured",
]
