"""Business logic services for toolchat-server.

This package contains the ConversationOrchestrator which drives the
function-call loop of each chat turn.
"""

from toolchat_server.services.conversation import (
    MAX_ITERATIONS,
    NOT_CONFIGURED_MESSAGE,
    TRUNCATION_MESSAGE,
    ChatResult,
    ConversationOrchestrator,
)

__all__ = [
    "ChatResult",
    "ConversationOrchestrator",
    "MAX_ITERATIONS",
    "NOT_CONFIGURED_MESSAGE",
    "TRUNCATION_MESSAGE",
]
