"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from toolchat_server import __version__
from toolchat_server.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of the toolchat-server.
    Also checks connectivity to the LLM provider if one is configured.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    provider_name = None
    provider_connected = None
    state = request.app.state

    provider = getattr(state, "provider", None)
    if provider is not None:
        provider_name = provider.provider_name()
        try:
            provider_connected = await provider.check_connection()
            logger.debug(f"Provider connectivity check: {provider_connected}")
        except Exception as e:
            logger.warning(f"Provider connectivity check failed: {e}")
            provider_connected = False

    return HealthResponse(
        status="ok",
        version=__version__,
        provider=provider_name,
        provider_connected=provider_connected,
        tool_count=len(state.tool_registry),
        active_threads=len(state.session_store),
    )
