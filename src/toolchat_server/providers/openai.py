"""OpenAI-compatible provider adapter.

Talks to any backend implementing the OpenAI chat completions API through an
injected httpx.AsyncClient. Uses the tools API: canonical function messages are
sent as "tool" messages paired with the preceding assistant call through a
synthesized tool_call_id.
"""

import json
import logging
from typing import Any, Sequence

import httpx

from toolchat_server.providers.base import ProviderAdapter, ProviderResponse
from toolchat_server.sessions.types import FUNCTION, ChatMessage, FunctionCallRequest
from toolchat_server.tools.types import ToolDefinition

logger = logging.getLogger(__name__)


def convert_messages(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    """Convert canonical messages to OpenAI chat messages."""
    openai_messages: list[dict[str, Any]] = []
    pending_call_id: str | None = None

    for index, msg in enumerate(messages):
        if msg.role == FUNCTION:
            openai_messages.append(
                {
                    "role": "tool",
                    "tool_call_id": pending_call_id or f"call_{index}",
                    "content": msg.content or "",
                }
            )
            pending_call_id = None
            continue

        openai_msg: dict[str, Any] = {"role": msg.role, "content": msg.content or ""}

        if msg.function_call is not None:
            # null content is only accepted alongside tool_calls
            openai_msg["content"] = msg.content
            pending_call_id = f"call_{index}"
            openai_msg["tool_calls"] = [
                {
                    "id": pending_call_id,
                    "type": "function",
                    "function": {
                        "name": msg.function_call.name,
                        "arguments": msg.function_call.arguments_json or "{}",
                    },
                }
            ]

        openai_messages.append(openai_msg)

    return openai_messages


def convert_tools(tools: Sequence[ToolDefinition]) -> list[dict[str, Any]]:
    """Convert tool definitions to OpenAI function tools."""
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


def parse_response(body: dict[str, Any]) -> ProviderResponse:
    """Convert a chat completion body into a ProviderResponse.

    Raises:
        KeyError, IndexError, TypeError: If the body has no choices/message
    """
    message = body["choices"][0]["message"]
    content = message.get("content")
    function_call = None

    tool_calls = message.get("tool_calls") or []
    if tool_calls:
        function = tool_calls[0].get("function") or {}
    else:
        # legacy function_call field
        function = message.get("function_call") or {}

    name = function.get("name")
    if name:
        arguments = function.get("arguments")
        if arguments is None:
            arguments = "{}"
        elif not isinstance(arguments, str):
            arguments = json.dumps(arguments, ensure_ascii=False)
        function_call = FunctionCallRequest(name=name, arguments_json=arguments)

    return ProviderResponse(content=content, function_call=function_call)


class OpenAICompatibleProvider(ProviderAdapter):
    """Adapter for OpenAI and OpenAI-compatible chat completion APIs.

    Attributes:
        base_url: API base URL, e.g. "https://api.openai.com/v1"
        model: Model used for every chat request
        temperature: Sampling temperature
        max_tokens: Completion token limit
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Bearer token sent with every request
            model: Model name
            base_url: API base URL
            temperature: Sampling temperature
            max_tokens: Completion token limit
            timeout: Per-request timeout in seconds
            http_client: Client to use; one is created (and owned) when omitted
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._api_key = api_key
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        logger.info(f"OpenAICompatibleProvider initialized with {self.base_url}, model: {model}")

    def provider_name(self) -> str:
        return f"OpenAI ({self.model})"

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def check_connection(self) -> bool:
        try:
            response = await self._client.get(
                f"{self.base_url}/models", headers=self._headers, timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except Exception as e:
            logger.warning(f"OpenAI connection check failed: {e}")
            return False

    async def chat(
        self, messages: Sequence[ChatMessage], tools: Sequence[ToolDefinition]
    ) -> ProviderResponse:
        """Send the conversation and return the first choice.

        Errors are reported as content and never raised.
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": convert_messages(messages),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            payload["tools"] = convert_tools(tools)

        try:
            logger.debug(f"OpenAI chat with {len(messages)} messages, {len(tools)} tools")
            response = await self._client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=self._headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except Exception as e:
            logger.error(f"OpenAI error: {e}")
            return ProviderResponse(content=f"Error communicating with OpenAI: {e}")

        try:
            return parse_response(body)
        except Exception as e:
            logger.error(f"Error parsing OpenAI response: {e}")
            return ProviderResponse(content=f"Error parsing response: {e!r}")

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
        logger.debug("OpenAICompatibleProvider closed")
