"""Pydantic models for chat API requests and responses.

Response fields use camelCase aliases (threadId, messageCount, functionCall)
on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat and POST /api/v1/chat/{thread_id}."""

    message: str = Field(description="The user message to send")

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"message": "list tables"}]}
    )


class ChatResponse(BaseModel):
    """Response body for chat endpoints."""

    success: bool = Field(description="False when the turn could not run")
    response: str | None = Field(default=None, description="Assistant response text")
    thread_id: str | None = Field(
        default=None,
        alias="threadId",
        description="Thread identifier; send it back to continue the conversation",
    )
    error: str | None = Field(default=None, description="Error description, if any")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "response": "There are 2 tables: orders, users.",
                "threadId": "3f2c9a1b7d8e4f60a1b2c3d4e5f60718",
                "error": None,
            }
        },
    )


class FunctionCallResponse(BaseModel):
    """A tool call carried by an assistant message."""

    name: str
    arguments: str


class HistoryMessage(BaseModel):
    """A single message in a thread history."""

    role: str
    content: str | None = None
    name: str | None = None
    function_call: FunctionCallResponse | None = Field(default=None, alias="functionCall")

    model_config = ConfigDict(populate_by_name=True)


class HistoryResponse(BaseModel):
    """Response model for GET /api/v1/chat/{thread_id}/history."""

    thread_id: str = Field(alias="threadId")
    message_count: int = Field(alias="messageCount")
    messages: list[HistoryMessage]

    model_config = ConfigDict(populate_by_name=True)


class ClearResponse(BaseModel):
    """Response model for DELETE /api/v1/chat/{thread_id}."""

    success: bool = True
    message: str = "Conversation cleared"
    thread_id: str = Field(alias="threadId")

    model_config = ConfigDict(populate_by_name=True)


class ThreadListResponse(BaseModel):
    """Response model for GET /api/v1/chat/threads."""

    count: int
    threads: list[str]
