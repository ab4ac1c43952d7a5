"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, chat, tools, mcp).
"""

from toolchat_server.routers import chat, health, mcp, tools

__all__ = [
    "chat",
    "health",
    "mcp",
    "tools",
]
