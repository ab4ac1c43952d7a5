"""Integration tests for the JSON-RPC endpoint."""

import json

import pytest
from httpx import AsyncClient

from toolchat_server.providers import ProviderResponse
from toolchat_server.routers.mcp import endpoint_events


async def rpc(client: AsyncClient, method: str, params: dict | None = None, request_id=1):
    response = await client.post(
        "/mcp/message",
        json={"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or {}},
    )
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_initialize(async_client: AsyncClient):
    """Test the initialize handshake."""
    data = await rpc(async_client, "initialize")

    assert data["id"] == 1
    result = data["result"]
    assert result["protocolVersion"] == "2024-11-05"
    assert result["serverInfo"] == {"name": "toolchat-server", "version": "0.1.0"}


@pytest.mark.asyncio
async def test_tools_list(async_client: AsyncClient):
    """Test tools/list."""
    data = await rpc(async_client, "tools/list")

    names = [t["name"] for t in data["result"]["tools"]]
    assert names == ["getCurrentTime", "getServerInfo"]


@pytest.mark.asyncio
async def test_tools_call(async_client: AsyncClient):
    """Test tools/call with a built-in tool."""
    data = await rpc(async_client, "tools/call", {"name": "getServerInfo", "arguments": {}})

    result = data["result"]
    assert result["isError"] is False
    assert json.loads(result["content"][0]["text"])["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_tools_call_invalid_params(async_client: AsyncClient):
    """Test tools/call without a tool name."""
    data = await rpc(async_client, "tools/call", {"arguments": {}})

    assert data["error"]["code"] == -32602


@pytest.mark.asyncio
async def test_chat_message(async_client: AsyncClient, scripted_provider):
    """Test chat/message on a new and then an existing thread."""
    scripted_provider.responses = [
        ProviderResponse(content="First answer"),
        ProviderResponse(content="Second answer"),
    ]

    first = (await rpc(async_client, "chat/message", {"message": "one"}))["result"]
    second = (
        await rpc(
            async_client,
            "chat/message",
            {"message": "two", "threadId": first["threadId"]},
            request_id="req-2",
        )
    )["result"]

    assert first["message"] == "First answer"
    assert first["success"] is True
    assert second["message"] == "Second answer"
    assert second["threadId"] == first["threadId"]


@pytest.mark.asyncio
async def test_chat_message_requires_text(async_client: AsyncClient):
    """Test chat/message without a message."""
    data = await rpc(async_client, "chat/message", {})
    assert data["error"]["code"] == -32602


@pytest.mark.asyncio
async def test_chat_message_rejects_non_string_thread_id(
    async_client: AsyncClient, scripted_provider
):
    """Test that a non-string threadId is an invalid-params error."""
    data = await rpc(async_client, "chat/message", {"message": "hi", "threadId": 42})

    assert data["error"]["code"] == -32602
    assert scripted_provider.calls == []


@pytest.mark.asyncio
async def test_chat_message_internal_error(async_client: AsyncClient, test_app):
    """Test that an unexpected failure becomes a JSON-RPC internal error."""

    async def broken_chat(thread_id, message):
        raise RuntimeError("backend exploded")

    test_app.state.orchestrator.chat = broken_chat

    data = await rpc(async_client, "chat/message", {"message": "hi"}, request_id=3)

    assert data["id"] == 3
    assert data["error"]["code"] == -32603
    assert "backend exploded" in data["error"]["message"]


@pytest.mark.asyncio
async def test_unknown_method(async_client: AsyncClient):
    """Test that unknown methods return -32601."""
    data = await rpc(async_client, "resources/list", request_id=7)

    assert data["id"] == 7
    assert data["error"]["code"] == -32601
    assert "resources/list" in data["error"]["message"]


class _DisconnectingRequest:
    """Stands in for a Starlette request whose client goes away at once."""

    async def is_disconnected(self) -> bool:
        return True


@pytest.mark.asyncio
async def test_sse_announces_message_endpoint():
    """Test the first SSE event and the end of the stream on disconnect."""
    events = [event async for event in endpoint_events(_DisconnectingRequest(), 0)]

    assert events == [{"event": "endpoint", "data": "/mcp/message"}]
