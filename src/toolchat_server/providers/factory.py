"""Selection of the provider adapter from configuration."""

import logging

from toolchat_server.config import ToolchatServerSettings
from toolchat_server.providers.base import ProviderAdapter
from toolchat_server.providers.ollama import OllamaProvider
from toolchat_server.providers.openai import OpenAICompatibleProvider

logger = logging.getLogger(__name__)


def build_provider(settings: ToolchatServerSettings) -> ProviderAdapter | None:
    """Create the provider adapter selected by the settings.

    "openai" without an API key falls back to Ollama. "none" configures no
    provider at all, which the orchestrator reports as a configuration error.

    Returns:
        The configured adapter, or None
    """
    if settings.provider == "none":
        logger.warning("No AI provider configured; chat requests will be rejected")
        return None

    if settings.provider == "openai":
        if settings.openai_api_key:
            logger.info(f"Configuring OpenAI chat provider (model: {settings.openai_model})")
            return OpenAICompatibleProvider(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
                timeout=settings.request_timeout_seconds,
            )
        logger.warning("OpenAI API key not configured; falling back to Ollama")

    logger.info(
        f"Configuring Ollama chat provider (host: {settings.ollama_host}, "
        f"model: {settings.ollama_model})"
    )
    return OllamaProvider(
        host=settings.ollama_host,
        model=settings.ollama_model,
        temperature=settings.temperature,
        timeout=settings.request_timeout_seconds,
    )
