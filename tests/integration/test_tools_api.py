"""Integration tests for the tool catalog endpoints."""

import json

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_tools(async_client: AsyncClient):
    """Test listing the built-in tools with their schemas."""
    response = await async_client.get("/api/v1/tools")

    assert response.status_code == 200
    tools = response.json()["tools"]
    assert [t["name"] for t in tools] == ["getCurrentTime", "getServerInfo"]
    assert tools[0]["inputSchema"]["type"] == "object"
    assert "timezone" in tools[0]["inputSchema"]["properties"]


@pytest.mark.asyncio
async def test_call_tool(async_client: AsyncClient):
    """Test calling a tool directly."""
    response = await async_client.post(
        "/api/v1/tools/getCurrentTime/call", json={"arguments": {}}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["isError"] is False
    assert json.loads(data["content"][0]["text"])["timezone"] == "UTC"


@pytest.mark.asyncio
async def test_call_tool_without_body_arguments(async_client: AsyncClient):
    """Test that the arguments object is optional."""
    response = await async_client.post("/api/v1/tools/getServerInfo/call", json={})

    assert response.status_code == 200
    assert response.json()["isError"] is False


@pytest.mark.asyncio
async def test_call_unknown_tool(async_client: AsyncClient):
    """Test that an unknown tool is an error result, not an HTTP error."""
    response = await async_client.post("/api/v1/tools/nope/call", json={"arguments": {}})

    assert response.status_code == 200
    data = response.json()
    assert data["isError"] is True
    error = json.loads(data["content"][0]["text"])["error"]
    assert error == {"code": "tool_not_found", "message": "Unknown function: nope"}
