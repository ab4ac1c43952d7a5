"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from toolchat_server.models.chat import (
    ChatRequest,
    ChatResponse,
    ClearResponse,
    HistoryMessage,
    HistoryResponse,
    ThreadListResponse,
)
from toolchat_server.models.health import HealthResponse
from toolchat_server.models.tools import (
    CallToolRequest,
    CallToolResponse,
    JsonRpcRequest,
    ToolInfo,
    ToolListResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ClearResponse",
    "HistoryMessage",
    "HistoryResponse",
    "ThreadListResponse",
    "HealthResponse",
    "CallToolRequest",
    "CallToolResponse",
    "JsonRpcRequest",
    "ToolInfo",
    "ToolListResponse",
]
