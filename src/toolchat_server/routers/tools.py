"""Tool catalog endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from toolchat_server.dependencies import get_tool_catalog
from toolchat_server.models.tools import (
    CallToolRequest,
    CallToolResponse,
    ToolInfo,
    ToolListResponse,
)
from toolchat_server.tools import ToolCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse)
async def list_tools(
    catalog: Annotated[ToolCatalog, Depends(get_tool_catalog)],
) -> ToolListResponse:
    """List every registered tool with its input schema."""
    return ToolListResponse(
        tools=[ToolInfo.model_validate(tool) for tool in catalog.list_tools()]
    )


@router.post("/{name}/call", response_model=CallToolResponse)
async def call_tool(
    name: str,
    request_body: CallToolRequest,
    catalog: Annotated[ToolCatalog, Depends(get_tool_catalog)],
) -> CallToolResponse:
    """Execute a tool directly.

    Unknown tools and invalid arguments are reported in the result with
    isError=true rather than as HTTP errors.
    """
    logger.info(f"Direct tool call: {name}")
    result = await catalog.call_tool(name, request_body.arguments)
    return CallToolResponse.model_validate(result)
