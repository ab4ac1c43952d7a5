"""Data types for conversation threads.

This module defines the canonical, provider-agnostic message model used by the
orchestrator and every provider adapter, plus the in-memory conversation thread.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable

SYSTEM = "system"
USER = "user"
ASSISTANT = "assistant"
FUNCTION = "function"

ROLES = frozenset({SYSTEM, USER, ASSISTANT, FUNCTION})


@dataclass(frozen=True)
class FunctionCallRequest:
    """A tool call requested by the model.

    Attributes:
        name: Name of the tool the model wants to run
        arguments_json: Arguments as a JSON object string, as produced by the model
    """

    name: str
    arguments_json: str = "{}"


@dataclass
class ChatMessage:
    """A canonical chat message.

    Only assistant messages carry a function_call, and only function messages
    carry a name (the tool that produced the result).
    """

    role: str
    content: str | None = None
    name: str | None = None
    function_call: FunctionCallRequest | None = None

    def __post_init__(self) -> None:
        """Validate the role and the role-specific fields."""
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role}")
        if self.function_call is not None and self.role != ASSISTANT:
            raise ValueError("Only assistant messages can carry a function call")
        if self.name is not None and self.role != FUNCTION:
            raise ValueError("Only function messages can carry a name")

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=USER, content=content)

    @classmethod
    def assistant(
        cls, content: str | None, function_call: FunctionCallRequest | None = None
    ) -> "ChatMessage":
        return cls(role=ASSISTANT, content=content, function_call=function_call)

    @classmethod
    def function(cls, name: str, content: str) -> "ChatMessage":
        return cls(role=FUNCTION, content=content, name=name)

    def to_dict(self) -> dict[str, Any]:
        """Convert the message to a JSON-friendly dictionary."""
        return {
            "role": self.role,
            "content": self.content,
            "name": self.name,
            "functionCall": (
                {
                    "name": self.function_call.name,
                    "arguments": self.function_call.arguments_json,
                }
                if self.function_call
                else None
            ),
        }


@dataclass
class ConversationThread:
    """An ordered message history identified by an opaque id.

    messages[0] is always the system message. The list is replaced wholesale on
    trim so that a reader holding a reference never sees a partial trim.
    """

    thread_id: str
    messages: list[ChatMessage]
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    last_access_time: float = 0.0

    def __post_init__(self) -> None:
        if not self.messages or self.messages[0].role != SYSTEM:
            raise ValueError("A conversation thread must start with a system message")
        if not self.last_access_time:
            self.last_access_time = self.clock()

    @classmethod
    def create(
        cls,
        thread_id: str,
        system_prompt: str,
        clock: Callable[[], float] = time.monotonic,
    ) -> "ConversationThread":
        """Create a thread holding only its system message."""
        return cls(
            thread_id=thread_id,
            messages=[ChatMessage.system(system_prompt)],
            clock=clock,
        )

    def touch(self) -> None:
        """Record an access at the current clock time."""
        self.last_access_time = self.clock()

    def append(self, message: ChatMessage) -> None:
        self.messages.append(message)

    def trim(self, max_messages: int) -> int:
        """Trim the history to at most max_messages, keeping the system message.

        The oldest non-system messages are dropped first and the relative order
        of the kept messages is preserved.

        Args:
            max_messages: Maximum number of messages to keep (at least 2)

        Returns:
            Number of messages dropped
        """
        if max_messages < 2:
            raise ValueError("max_messages must be at least 2")

        overflow = len(self.messages) - max_messages
        if overflow <= 0:
            return 0

        self.messages = [self.messages[0], *self.messages[-(max_messages - 1) :]]
        return overflow

    def snapshot(self) -> list[ChatMessage]:
        """Get a copy of the message list safe to iterate while turns append."""
        return list(self.messages)
