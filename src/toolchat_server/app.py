"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolchat_server import __version__
from toolchat_server.config import ToolchatServerSettings
from toolchat_server.providers import build_provider
from toolchat_server.routers import chat, health, mcp, tools
from toolchat_server.services import ConversationOrchestrator
from toolchat_server.sessions import SessionStore
from toolchat_server.tools import ServerToolProvider, ToolProvider, ToolRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The provider adapter and the orchestrator are created once at startup and
    stored in app.state for reuse across all requests. The session store's
    expiry sweeper runs for the lifetime of the application.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ToolchatServerSettings = app.state.settings

    # Startup: provider and orchestrator
    app.state.provider = build_provider(settings)
    app.state.orchestrator = ConversationOrchestrator(
        provider=app.state.provider,
        registry=app.state.tool_registry,
        store=app.state.session_store,
        max_iterations=settings.max_iterations,
        max_history=settings.max_history,
    )

    if app.state.provider is not None:
        connected = await app.state.provider.check_connection()
        if connected:
            logger.info(f"Successfully connected to {app.state.provider.provider_name()}")
        else:
            logger.warning(
                f"Could not connect to {app.state.provider.provider_name()} - check if it is running"
            )

    app.state.session_store.start_sweeper()

    yield

    # Shutdown: stop the sweeper and release the provider
    await app.state.session_store.stop_sweeper()
    if app.state.provider is not None:
        await app.state.provider.close()
        logger.info("Provider closed")


def build_tool_registry(
    settings: ToolchatServerSettings,
    tool_providers: Sequence[ToolProvider] = (),
) -> ToolRegistry:
    """Build the frozen tool registry from the built-in and given providers."""
    providers: list[ToolProvider] = []
    registry_holder: list[ToolRegistry] = []

    if settings.builtin_tools_enabled:
        providers.append(
            ServerToolProvider(
                server_name="toolchat-server",
                version=__version__,
                tool_count=lambda: len(registry_holder[0]) if registry_holder else 0,
            )
        )
    providers.extend(tool_providers)

    registry = ToolRegistry.from_providers(
        providers, collision_policy=settings.tool_name_collision
    )
    registry_holder.append(registry)
    return registry


def create_app(
    settings: ToolchatServerSettings | None = None,
    tool_providers: Sequence[ToolProvider] = (),
) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. The tool registry is built here,
    synchronously, before the application serves any request.

    Args:
        settings: Optional ToolchatServerSettings instance. If not provided,
                  settings will be loaded from environment variables.
        tool_providers: Operation providers contributing tools, in
                  registration order after the built-in tools.

    Returns:
        FastAPI: Configured FastAPI application instance.

    Raises:
        ToolRegistrationError: If tool names collide under the "reject" policy.
    """
    if settings is None:
        from toolchat_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="toolchat-server",
        description="Tool-calling conversation server for OpenAI and Ollama",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings and startup-built services in app.state
    app.state.settings = settings
    app.state.tool_registry = build_tool_registry(settings, tool_providers)
    app.state.session_store = SessionStore(
        system_prompt=settings.resolved_system_prompt,
        conversation_timeout_seconds=settings.conversation_timeout_seconds,
        sweep_interval_seconds=settings.sweep_interval_seconds,
    )

    # Configure CORS
    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(tools.router)
    app.include_router(mcp.router)

    return app
