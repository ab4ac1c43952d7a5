"""Ollama provider adapter.

This module wraps ollama.AsyncClient behind the ProviderAdapter interface.
Chat requests are sent without streaming and with the registry's tools.
"""

import json
import logging
from typing import Any, Sequence

import ollama

from toolchat_server.providers.base import ProviderAdapter, ProviderResponse
from toolchat_server.sessions.types import FUNCTION, ChatMessage, FunctionCallRequest
from toolchat_server.tools.types import ToolDefinition

logger = logging.getLogger(__name__)


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Read a field from an ollama response object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _decode_arguments(arguments_json: str) -> Any:
    try:
        return json.loads(arguments_json)
    except (json.JSONDecodeError, TypeError):
        return arguments_json


def convert_messages(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    """Convert canonical messages to Ollama's chat format.

    The canonical "function" role becomes Ollama's "tool" role and assistant
    function calls become a single-element tool_calls list.
    """
    ollama_messages = []

    for msg in messages:
        ollama_msg: dict[str, Any] = {
            "role": "tool" if msg.role == FUNCTION else msg.role,
            "content": msg.content or "",
        }

        if msg.role == FUNCTION and msg.name:
            ollama_msg["tool_name"] = msg.name

        if msg.function_call is not None:
            ollama_msg["tool_calls"] = [
                {
                    "function": {
                        "name": msg.function_call.name,
                        "arguments": _decode_arguments(msg.function_call.arguments_json),
                    }
                }
            ]

        ollama_messages.append(ollama_msg)

    return ollama_messages


def convert_tools(tools: Sequence[ToolDefinition]) -> list[dict[str, Any]]:
    """Convert tool definitions to Ollama's function tool schema."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.to_json_schema(),
            },
        }
        for tool in tools
    ]


def parse_response(response: Any) -> ProviderResponse:
    """Convert an Ollama chat response into a ProviderResponse.

    Only the first tool call is honored. Arguments are re-encoded as a JSON
    string to match the canonical FunctionCallRequest.
    """
    message = _get(response, "message")
    if message is None:
        return ProviderResponse(content="No message in response")

    content = _get(message, "content")
    function_call = None

    tool_calls = _get(message, "tool_calls") or _get(response, "tool_calls")
    if tool_calls:
        first_call = tool_calls[0]
        function = _get(first_call, "function") or first_call
        name = _get(function, "name")
        if name:
            arguments = _get(function, "arguments")
            if arguments is None:
                arguments_json = "{}"
            elif isinstance(arguments, str):
                arguments_json = arguments
            else:
                arguments_json = json.dumps(dict(arguments), ensure_ascii=False)
            function_call = FunctionCallRequest(name=name, arguments_json=arguments_json)

    return ProviderResponse(content=content, function_call=function_call)


class OllamaProvider(ProviderAdapter):
    """Async adapter for the Ollama chat API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        model: Model used for every chat request
        temperature: Sampling temperature
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(
        self,
        host: str,
        model: str,
        temperature: float = 0.7,
        timeout: float | None = None,
    ) -> None:
        """Initialize the Ollama provider.

        Args:
            host: The Ollama server URL
            model: Model name to chat with
            temperature: Sampling temperature
            timeout: Per-request timeout in seconds, None for no timeout
        """
        self.host = host.rstrip("/")
        self.model = model
        self.temperature = temperature
        self._client = ollama.AsyncClient(host=self.host, timeout=timeout)
        logger.info(f"OllamaProvider initialized with host: {self.host}, model: {model}")

    def provider_name(self) -> str:
        return f"Ollama ({self.model})"

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat(
        self, messages: Sequence[ChatMessage], tools: Sequence[ToolDefinition]
    ) -> ProviderResponse:
        """Send the conversation to Ollama and return its reply.

        Errors are reported as content and never raised.
        """
        try:
            logger.debug(f"Ollama chat with {len(messages)} messages, {len(tools)} tools")
            response = await self._client.chat(
                model=self.model,
                messages=convert_messages(messages),
                tools=convert_tools(tools) or None,
                stream=False,
                options={"temperature": self.temperature},
            )
        except Exception as e:
            logger.error(f"Ollama error: {e}")
            return ProviderResponse(content=f"Error communicating with Ollama: {e}")

        try:
            return parse_response(response)
        except Exception as e:
            logger.error(f"Error parsing Ollama response: {e}")
            return ProviderResponse(content=f"Error parsing response: {e}")

    async def close(self) -> None:
        """Close the client.

        ollama.AsyncClient uses httpx internally, which handles cleanup.
        """
        logger.debug("OllamaProvider closed")
