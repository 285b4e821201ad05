"""LLM provider implementations for aoaicli."""

from .azure_openai_provider import AzureOpenAIProvider
from .base import LLMProvider, ProviderError

__all__ = [
    "LLMProvider",
    "ProviderError",
    "AzureOpenAIProvider",
]
