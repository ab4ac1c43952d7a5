"""Pytest configuration and shared fixtures for toolchat-server tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup, and a scripted provider
that stands in for a real LLM backend.
"""

from typing import Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolchat_server import create_app
from toolchat_server.config import ToolchatServerSettings
from toolchat_server.providers import ProviderAdapter, ProviderResponse
from toolchat_server.sessions import ChatMessage
from toolchat_server.tools import ToolDefinition


class ScriptedProvider(ProviderAdapter):
    """Provider that replays canned responses and records every call.

    Once the script is exhausted, the fallback response is returned forever.
    """

    def __init__(
        self,
        responses: Sequence[ProviderResponse] = (),
        fallback: ProviderResponse | None = None,
    ):
        self.responses = list(responses)
        self.fallback = fallback or ProviderResponse(content="OK")
        self.calls: list[tuple[list[ChatMessage], tuple[ToolDefinition, ...]]] = []
        self.closed = False

    async def chat(self, messages, tools):
        # Copy: the caller keeps appending to the list it passed in
        self.calls.append((list(messages), tuple(tools)))
        if self.responses:
            return self.responses.pop(0)
        return self.fallback

    def provider_name(self) -> str:
        return "Scripted (test)"

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_provider():
    """Factory fixture building ScriptedProvider instances."""
    return ScriptedProvider


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings that never reach a real LLM backend.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        ToolchatServerSettings: Settings instance configured for testing.
    """
    return ToolchatServerSettings(
        host="127.0.0.1",
        port=8000,
        provider="none",
        system_prompt="You are a test assistant.",
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
