"""Conversation orchestration service.

This module provides the ConversationOrchestrator which drives one user turn:
it sends the thread history and tool schemas to the provider, executes any
requested tool, feeds the result back, and repeats until the model answers or
the iteration cap is reached.
"""

import logging
from dataclasses import dataclass
from typing import Any

from toolchat_server.providers.base import ProviderAdapter
from toolchat_server.sessions.store import SessionStore
from toolchat_server.sessions.types import ChatMessage, FunctionCallRequest
from toolchat_server.tools.registry import (
    InvalidArgumentError,
    ToolRegistry,
    error_message,
    parse_arguments,
)
from toolchat_server.tools.types import (
    INVALID_ARGUMENT,
    TOOL_EXECUTION_FAILED,
    FunctionResult,
)

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10
DEFAULT_MAX_HISTORY = 50
TRUNCATION_MESSAGE = "Max iterations reached. The conversation has been truncated."
NOT_CONFIGURED_MESSAGE = (
    "AI provider is not configured. Please configure either OpenAI or Ollama."
)
EMPTY_RESPONSE_MESSAGE = "No response from AI"


@dataclass(frozen=True)
class ChatResult:
    """Outcome of a chat turn.

    Attributes:
        response: Text for the caller
        thread_id: Thread the turn ran on; reuse it to continue the conversation
        error: Set when the turn could not run at all
    """

    response: str
    thread_id: str
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class ConversationOrchestrator:
    """Drives the bounded function-call loop for each user turn.

    Turns on different threads run fully in parallel. Turns on the same thread
    are expected to be serialized by the caller.
    """

    def __init__(
        self,
        provider: ProviderAdapter | None,
        registry: ToolRegistry,
        store: SessionStore,
        max_iterations: int = MAX_ITERATIONS,
        max_history: int = DEFAULT_MAX_HISTORY,
    ):
        """Initialize the orchestrator.

        Args:
            provider: LLM adapter, or None when no backend is configured
            registry: Frozen tool registry
            store: Session store holding the conversation threads
            max_iterations: Cap on model calls within one user turn
            max_history: Maximum thread length after appending the user message
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if max_history < 2:
            raise ValueError("max_history must be at least 2")
        self.provider = provider
        self.registry = registry
        self.store = store
        self.max_iterations = max_iterations
        self.max_history = max_history

        if provider is not None:
            logger.info(f"Chat service initialized with provider: {provider.provider_name()}")

    async def chat(self, thread_id: str | None, message: str) -> ChatResult:
        """Run one user turn.

        Args:
            thread_id: Existing thread id; None or blank starts a new thread
            message: The user's message

        Returns:
            ChatResult with the final response. Never raises for provider or
            tool failures.
        """
        if not thread_id or not thread_id.strip():
            thread_id = SessionStore.generate_thread_id()

        if self.provider is None:
            return ChatResult(
                response=NOT_CONFIGURED_MESSAGE,
                thread_id=thread_id,
                error=NOT_CONFIGURED_MESSAGE,
            )

        thread = self.store.get_or_create(thread_id)
        thread.touch()

        thread.append(ChatMessage.user(message))
        dropped = thread.trim(self.max_history)
        if dropped:
            logger.debug(f"Trimmed {dropped} messages from thread {thread_id}")

        tools = self.registry.definitions()
        provider_messages = thread.snapshot()

        for iteration in range(1, self.max_iterations + 1):
            logger.debug(f"Thread {thread_id}: iteration {iteration}")

            response = await self.provider.chat(provider_messages, tools)

            if response.function_call is not None:
                call = response.function_call
                logger.info(f"Thread {thread_id}: function call {call.name}")
                logger.debug(f"Arguments: {call.arguments_json}")

                assistant_message = ChatMessage.assistant(response.content, call)
                provider_messages.append(assistant_message)
                thread.append(assistant_message)

                result = await self._execute(call)

                function_message = ChatMessage.function(call.name, result.content)
                provider_messages.append(function_message)
                thread.append(function_message)
                continue

            content = response.content
            logger.debug(f"Thread {thread_id}: final response after {iteration} iterations")
            thread.append(ChatMessage.assistant(content))
            thread.touch()
            return ChatResult(
                response=content if content is not None else EMPTY_RESPONSE_MESSAGE,
                thread_id=thread_id,
            )

        logger.warning(
            f"Thread {thread_id}: reached {self.max_iterations} iterations without a final answer"
        )
        thread.touch()
        return ChatResult(response=TRUNCATION_MESSAGE, thread_id=thread_id)

    async def _execute(self, call: FunctionCallRequest) -> FunctionResult:
        """Execute a requested call; failures come back as error results."""
        try:
            arguments = parse_arguments(call.arguments_json)
        except InvalidArgumentError as e:
            logger.warning(f"Invalid arguments for '{call.name}': {e}")
            return FunctionResult.error(INVALID_ARGUMENT, str(e))

        try:
            result = await self.registry.execute(call.name, arguments)
        except Exception as e:
            logger.error(f"Error executing function {call.name}: {e}", exc_info=True)
            return FunctionResult.error(TOOL_EXECUTION_FAILED, error_message(e))

        if result.is_error:
            logger.info(f"Function {call.name} returned an error result")
        return result

    def history(self, thread_id: str) -> list[dict[str, Any]]:
        """Get the message history of a thread, empty for unknown ids."""
        thread = self.store.get(thread_id)
        if thread is None:
            return []
        return [message.to_dict() for message in thread.snapshot()]

    def clear(self, thread_id: str) -> None:
        self.store.clear(thread_id)

    def list_active(self) -> list[str]:
        return self.store.list_active()
