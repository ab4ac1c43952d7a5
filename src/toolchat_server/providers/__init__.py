"""LLM provider adapters.

This package normalizes heterogeneous LLM backends into the canonical
ProviderResponse. All adapters are async and never raise from chat().
"""

from toolchat_server.providers.base import ProviderAdapter, ProviderResponse
from toolchat_server.providers.factory import build_provider
from toolchat_server.providers.ollama import OllamaProvider
from toolchat_server.providers.openai import OpenAICompatibleProvider

__all__ = [
    "ProviderAdapter",
    "ProviderResponse",
    "OllamaProvider",
    "OpenAICompatibleProvider",
    "build_provider",
]
