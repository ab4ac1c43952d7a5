"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of toolchat-server.
        provider: Name of the configured LLM provider, None when unconfigured.
        provider_connected: Whether the provider backend is reachable.
        tool_count: Number of registered tools.
        active_threads: Number of live conversation threads.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of toolchat-server")
    provider: str | None = Field(default=None, description="Configured LLM provider")
    provider_connected: bool | None = Field(
        default=None, description="Whether the LLM provider is reachable"
    )
    tool_count: int = Field(default=0, description="Number of registered tools")
    active_threads: int = Field(default=0, description="Number of live threads")
