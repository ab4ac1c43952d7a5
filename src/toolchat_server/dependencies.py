"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from toolchat_server.config import ToolchatServerSettings
from toolchat_server.services import ConversationOrchestrator
from toolchat_server.tools import ToolCatalog, ToolRegistry


@lru_cache
def get_settings() -> ToolchatServerSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the TOOLCHAT_ prefix.

    Returns:
        ToolchatServerSettings: The application configuration settings.
    """
    return ToolchatServerSettings()


def get_orchestrator(request: Request) -> ConversationOrchestrator:
    """Get the ConversationOrchestrator created during application startup.

    Args:
        request: The FastAPI request object.

    Returns:
        ConversationOrchestrator: The orchestrator instance.

    Raises:
        HTTPException: If the orchestrator is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "orchestrator"):
        raise HTTPException(
            status_code=503,
            detail="Conversation service not initialized",
        )
    return request.app.state.orchestrator


def get_tool_registry(request: Request) -> ToolRegistry:
    """Get the ToolRegistry built by create_app."""
    return request.app.state.tool_registry


def get_tool_catalog(request: Request) -> ToolCatalog:
    """Get a ToolCatalog over the application's registry."""
    return ToolCatalog(get_tool_registry(request))
