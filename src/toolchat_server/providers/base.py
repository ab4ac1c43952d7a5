"""Provider adapter interface and canonical response.

Every LLM backend is reached through a ProviderAdapter. Adapters translate the
canonical ChatMessage and ToolDefinition model into their backend's wire
format and back, so no vendor-specific type ever reaches the orchestrator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from toolchat_server.sessions.types import ChatMessage, FunctionCallRequest
from toolchat_server.tools.types import ToolDefinition


@dataclass(frozen=True)
class ProviderResponse:
    """Canonical model response.

    Attributes:
        content: Text produced by the model, if any
        function_call: Tool call requested by the model, if any
    """

    content: str | None = None
    function_call: FunctionCallRequest | None = None

    @property
    def has_function_call(self) -> bool:
        return self.function_call is not None


class ProviderAdapter(ABC):
    """Interface for LLM backends (OpenAI, Ollama, ...).

    Implementations must never raise from chat(): transport and parse failures
    are returned as a content-only ProviderResponse describing the error.
    """

    @abstractmethod
    async def chat(
        self, messages: Sequence[ChatMessage], tools: Sequence[ToolDefinition]
    ) -> ProviderResponse:
        """Send the conversation and tool schemas, return the model's reply."""

    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable backend name, for logs and health output."""

    async def check_connection(self) -> bool:
        """Check whether the backend is reachable."""
        return True

    async def close(self) -> None:
        """Release any network resources held by the adapter."""
