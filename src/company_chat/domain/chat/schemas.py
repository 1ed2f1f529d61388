"""Schemas for chat domain."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any, Literal

from pydantic import Field

from company_chat.domain.accounts.schemas import PydanticBaseModel

__all__ = (
    "ChatMessage",
    "ChatRequestSchema",
    "ChatResponseSchema",
    "QuotaExceededDetails",
    "QuotaExceededResponse",
)


class ChatMessage(PydanticBaseModel):
    role: Literal["user", "assistant", "system"] = Field(..., description="Role of the message sender")
    content: str = Field(..., description="Message content")


class ChatRequestSchema(PydanticBaseModel):
    """Request schema for a chat completion."""

    messages: list[ChatMessage] = Field(..., min_length=1, description="Conversation so far, oldest first")
    model: str | None = Field(None, description="Model to use, defaults to the configured model")
    conversation_id: str | None = Field(None, max_length=255, description="Optional conversation identifier")

    def to_messages(self) -> list[dict[str, Any]]:
        return [message.model_dump() for message in self.messages]


class ChatResponseSchema(PydanticBaseModel):
    """Response schema for a chat completion."""

    content: str = Field(..., description="Assistant reply")
    model: str = Field(..., description="Model that produced the reply")
    input_tokens: int = Field(..., description="Prompt tokens consumed")
    output_tokens: int = Field(..., description="Completion tokens consumed")
    conversation_id: str | None = None


class QuotaExceededDetails(PydanticBaseModel):
    scope: Literal["group", "user"] = Field(..., description="Whether the group or the user limit was reached")
    current_usage: int = Field(..., description="Tokens used this month")
    monthly_limit: int = Field(..., description="Tokens allowed per month")
    reset_date: datetime = Field(..., description="When the quota resets")


class QuotaExceededResponse(PydanticBaseModel):
    """Body of a 429 response caused by a used up monthly limit."""

    status_code: int = 429
    detail: str = Field(..., description="Human-readable error message")
    extra: QuotaExceededDetails
