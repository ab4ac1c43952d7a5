"""Unit tests for the Ollama provider adapter."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from toolchat_server.providers.ollama import (
    OllamaProvider,
    convert_messages,
    convert_tools,
    parse_response,
)
from toolchat_server.sessions import ChatMessage, FunctionCallRequest
from toolchat_server.tools import ToolDefinition, ToolParameter

LIST_TABLES = ToolDefinition(
    name="listTables",
    description="List the tables of a database",
    parameters=(ToolParameter("database", required=True),),
)


@pytest.fixture
def mock_ollama_async_client():
    """Create a mock ollama.AsyncClient."""
    with patch("toolchat_server.providers.ollama.ollama.AsyncClient") as mock_class:
        mock_instance = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def provider(mock_ollama_async_client):
    """Create an OllamaProvider with mocked AsyncClient."""
    return OllamaProvider(host="http://localhost:11434/", model="llama3.1")


class TestConversion:
    """Tests for canonical -> Ollama conversion."""

    def test_function_role_becomes_tool(self):
        """Test that function results are sent with the tool role."""
        result = convert_messages([ChatMessage.function("listTables", '["users"]')])

        assert result == [{"role": "tool", "content": '["users"]', "tool_name": "listTables"}]

    def test_assistant_call_becomes_tool_calls(self):
        """Test that a function call is sent with decoded arguments."""
        message = ChatMessage.assistant(
            None, FunctionCallRequest("listTables", '{"database": "shop"}')
        )

        result = convert_messages([message])

        assert result[0]["content"] == ""
        assert result[0]["tool_calls"] == [
            {"function": {"name": "listTables", "arguments": {"database": "shop"}}}
        ]

    def test_plain_messages(self):
        """Test that system and user messages keep their role."""
        result = convert_messages([ChatMessage.system("sys"), ChatMessage.user("hi")])

        assert result == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hi"},
        ]

    def test_convert_tools(self):
        """Test the function tool schema."""
        assert convert_tools([LIST_TABLES]) == [
            {
                "type": "function",
                "function": {
                    "name": "listTables",
                    "description": "List the tables of a database",
                    "parameters": LIST_TABLES.to_json_schema(),
                },
            }
        ]


class TestParseResponse:
    """Tests for Ollama response parsing."""

    def test_text_response(self):
        """Test a plain text reply."""
        response = parse_response({"message": {"role": "assistant", "content": "Hi"}})

        assert response.content == "Hi"
        assert response.function_call is None

    def test_first_tool_call_only(self):
        """Test that only the first of several tool calls is honored."""
        response = parse_response(
            {
                "message": {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [
                        {"function": {"name": "listTables", "arguments": {"database": "shop"}}},
                        {"function": {"name": "countRows", "arguments": {"table": "users"}}},
                    ],
                }
            }
        )

        assert response.function_call.name == "listTables"
        assert json.loads(response.function_call.arguments_json) == {"database": "shop"}

    def test_object_response(self):
        """Test parsing attribute-style response objects."""
        function = SimpleNamespace(name="listTables", arguments={"database": "shop"})
        message = SimpleNamespace(
            content=None, tool_calls=[SimpleNamespace(function=function)]
        )

        response = parse_response(SimpleNamespace(message=message))

        assert response.function_call == FunctionCallRequest(
            "listTables", '{"database": "shop"}'
        )

    def test_missing_message(self):
        """Test a response without a message."""
        assert parse_response({}).content == "No message in response"


@pytest.mark.asyncio
async def test_provider_initialization(provider):
    """Test that the provider strips the trailing slash and names itself."""
    assert provider.host == "http://localhost:11434"
    assert provider.provider_name() == "Ollama (llama3.1)"


@pytest.mark.asyncio
async def test_chat_sends_tools_without_streaming(provider, mock_ollama_async_client):
    """Test the request sent to Ollama."""
    mock_ollama_async_client.chat.return_value = {
        "message": {"role": "assistant", "content": "Hello"}
    }

    response = await provider.chat([ChatMessage.user("hi")], [LIST_TABLES])

    assert response.content == "Hello"
    kwargs = mock_ollama_async_client.chat.call_args.kwargs
    assert kwargs["model"] == "llama3.1"
    assert kwargs["stream"] is False
    assert kwargs["tools"][0]["function"]["name"] == "listTables"
    assert kwargs["options"] == {"temperature": 0.7}


@pytest.mark.asyncio
async def test_chat_without_tools(provider, mock_ollama_async_client):
    """Test that an empty tool list is not sent."""
    mock_ollama_async_client.chat.return_value = {"message": {"content": "Hi"}}

    await provider.chat([ChatMessage.user("hi")], [])

    assert mock_ollama_async_client.chat.call_args.kwargs["tools"] is None


@pytest.mark.asyncio
async def test_chat_error_is_returned_as_content(provider, mock_ollama_async_client):
    """Test that transport errors never raise."""
    mock_ollama_async_client.chat.side_effect = Exception("Connection refused")

    response = await provider.chat([ChatMessage.user("hi")], [])

    assert response.content == "Error communicating with Ollama: Connection refused"
    assert response.function_call is None


@pytest.mark.asyncio
async def test_check_connection(provider, mock_ollama_async_client):
    """Test connection checks in both outcomes."""
    mock_ollama_async_client.list.return_value = {"models": []}
    assert await provider.check_connection() is True

    mock_ollama_async_client.list.side_effect = Exception("Connection refused")
    assert await provider.check_connection() is False
