"""JSON-RPC endpoint for generic tool dispatch clients.

POST /mcp/message accepts JSON-RPC 2.0 requests for initialize, tools/list,
tools/call and chat/message. GET /mcp/sse announces the message endpoint over
Server-Sent Events.
"""

import asyncio
import logging
from typing import Any, AsyncIterator

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from toolchat_server import __version__
from toolchat_server.dependencies import get_orchestrator, get_tool_catalog
from toolchat_server.models.tools import JsonRpcRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mcp", tags=["mcp"])

PROTOCOL_VERSION = "2024-11-05"
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
MESSAGE_ENDPOINT = "/mcp/message"
KEEPALIVE_SECONDS = 15.0


def _result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message},
    }


async def endpoint_events(
    request: Request, keepalive_seconds: float = KEEPALIVE_SECONDS
) -> AsyncIterator[dict[str, str]]:
    """Announce the message endpoint, then idle until the client disconnects."""
    yield {"event": "endpoint", "data": MESSAGE_ENDPOINT}
    while not await request.is_disconnected():
        await asyncio.sleep(keepalive_seconds)


@router.get("/sse")
async def mcp_sse(request: Request) -> EventSourceResponse:
    """Open an SSE stream announcing the JSON-RPC message endpoint."""
    return EventSourceResponse(endpoint_events(request))


@router.post("/message")
async def mcp_message(message: JsonRpcRequest, request: Request) -> dict[str, Any]:
    """Handle one JSON-RPC request."""
    params = message.params

    if message.method == "initialize":
        return _result(
            message.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": "toolchat-server", "version": __version__},
            },
        )

    if message.method == "tools/list":
        catalog = get_tool_catalog(request)
        return _result(message.id, {"tools": catalog.list_tools()})

    if message.method == "tools/call":
        name = params.get("name")
        arguments = params.get("arguments") or {}
        if not isinstance(name, str) or not isinstance(arguments, dict):
            return _error(message.id, INVALID_PARAMS, "tools/call requires a name and an arguments object")
        catalog = get_tool_catalog(request)
        return _result(message.id, await catalog.call_tool(name, arguments))

    if message.method == "chat/message":
        text = params.get("message")
        if not isinstance(text, str) or not text.strip():
            return _error(message.id, INVALID_PARAMS, "chat/message requires a message")
        thread_id = params.get("threadId")
        if thread_id is not None and not isinstance(thread_id, str):
            return _error(message.id, INVALID_PARAMS, "threadId must be a string")
        orchestrator = get_orchestrator(request)
        try:
            result = await orchestrator.chat(thread_id, text)
        except Exception as e:
            logger.error(f"chat/message failed on thread {thread_id}: {e}", exc_info=True)
            return _error(message.id, INTERNAL_ERROR, f"Internal error: {e}")
        return _result(
            message.id,
            {
                "message": result.response,
                "threadId": result.thread_id,
                "success": result.success,
            },
        )

    logger.debug(f"Unknown JSON-RPC method: {message.method}")
    return _error(message.id, METHOD_NOT_FOUND, f"Method not found: {message.method}")
