"""Chat API endpoints.

This module provides endpoints for chatting on conversation threads and for
inspecting, clearing and listing threads.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from toolchat_server.dependencies import get_orchestrator
from toolchat_server.models.chat import (
    ChatRequest,
    ChatResponse,
    ClearResponse,
    HistoryMessage,
    HistoryResponse,
    ThreadListResponse,
)
from toolchat_server.services import ChatResult, ConversationOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])

MESSAGE_REQUIRED = "Message is required"


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ChatResponse(success=False, error=error).model_dump(by_alias=True),
    )


def _to_response(result: ChatResult) -> ChatResponse:
    return ChatResponse(
        success=result.success,
        response=result.response,
        thread_id=result.thread_id,
        error=result.error,
    )


async def _run_turn(
    orchestrator: ConversationOrchestrator, thread_id: str | None, message: str
) -> ChatResponse | JSONResponse:
    if not message.strip():
        return _bad_request(MESSAGE_REQUIRED)

    try:
        result = await orchestrator.chat(thread_id, message)
    except Exception as e:
        logger.error(f"Chat turn failed on thread {thread_id}: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ChatResponse(
                success=False, thread_id=thread_id, error=f"Internal error: {e}"
            ).model_dump(by_alias=True),
        )

    return _to_response(result)


@router.post("", response_model=ChatResponse)
async def chat_new_thread(
    request_body: ChatRequest,
    orchestrator: Annotated[ConversationOrchestrator, Depends(get_orchestrator)],
) -> ChatResponse | JSONResponse:
    """Send a message on a new conversation thread.

    Returns:
        ChatResponse carrying the new threadId
    """
    return await _run_turn(orchestrator, None, request_body.message)


@router.get("/threads", response_model=ThreadListResponse)
async def list_threads(
    orchestrator: Annotated[ConversationOrchestrator, Depends(get_orchestrator)],
) -> ThreadListResponse:
    """List all active conversation threads."""
    threads = orchestrator.list_active()
    return ThreadListResponse(count=len(threads), threads=threads)


@router.post("/{thread_id}", response_model=ChatResponse)
async def chat_on_thread(
    thread_id: str,
    request_body: ChatRequest,
    orchestrator: Annotated[ConversationOrchestrator, Depends(get_orchestrator)],
) -> ChatResponse | JSONResponse:
    """Send a message on an existing thread.

    An unknown thread id starts a new thread under that id.
    """
    return await _run_turn(orchestrator, thread_id, request_body.message)


@router.get("/{thread_id}/history", response_model=HistoryResponse)
async def get_history(
    thread_id: str,
    orchestrator: Annotated[ConversationOrchestrator, Depends(get_orchestrator)],
) -> HistoryResponse:
    """Get the message history of a thread (empty for unknown threads)."""
    messages = [
        HistoryMessage.model_validate(message)
        for message in orchestrator.history(thread_id)
    ]
    return HistoryResponse(
        thread_id=thread_id, message_count=len(messages), messages=messages
    )


@router.delete("/{thread_id}", response_model=ClearResponse)
async def clear_thread(
    thread_id: str,
    orchestrator: Annotated[ConversationOrchestrator, Depends(get_orchestrator)],
) -> ClearResponse:
    """Clear a conversation thread. Clearing an unknown thread succeeds."""
    orchestrator.clear(thread_id)
    return ClearResponse(thread_id=thread_id)
