"""Pydantic models for the tool catalog and the JSON-RPC endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolInfo(BaseModel):
    """A tool as listed by the catalog."""

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    model_config = ConfigDict(populate_by_name=True)


class ToolListResponse(BaseModel):
    """Response model for GET /api/v1/tools."""

    tools: list[ToolInfo]


class CallToolRequest(BaseModel):
    """Request body for POST /api/v1/tools/{name}/call."""

    arguments: dict[str, Any] = Field(default_factory=dict)


class TextContent(BaseModel):
    type: str = "text"
    text: str


class CallToolResponse(BaseModel):
    """Tool result wrapped as text content."""

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    model_config = ConfigDict(populate_by_name=True)


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request sent to POST /mcp/message."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    method: str = ""
    params: dict[str, Any] = Field(default_factory=dict)
