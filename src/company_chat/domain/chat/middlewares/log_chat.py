"""Logs every completed chat request."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from company_chat.domain.chat.pipeline import ChatContext, ChatNextDelegate, ChatResult

__all__ = ("LogChatMiddleware",)

logger = structlog.get_logger()


class LogChatMiddleware:
    order = 1000

    async def invoke(self, context: ChatContext, next_: ChatNextDelegate) -> ChatResult:
        started = time.perf_counter()
        result = await next_(context)
        await logger.ainfo(
            "Chat completed",
            user_id=str(context.user.id),
            conversation_id=context.request.conversation_id,
            model=result.model,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            duration_ms=round((time.perf_counter() - started) * 1000),
        )
        return result
