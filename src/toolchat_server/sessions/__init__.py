"""Conversation thread storage for toolchat-server.

This package provides the canonical message model, the in-memory
conversation thread, and the thread-safe SessionStore with idle expiry.
"""

from toolchat_server.sessions.store import SessionStore
from toolchat_server.sessions.types import (
    ASSISTANT,
    FUNCTION,
    SYSTEM,
    USER,
    ChatMessage,
    ConversationThread,
    FunctionCallRequest,
)

__all__ = [
    # Core classes
    "SessionStore",
    "ConversationThread",
    # Message types
    "ChatMessage",
    "FunctionCallRequest",
    # Roles
    "SYSTEM",
    "USER",
    "ASSISTANT",
    "FUNCTION",
]
