"""Controllers for chat domain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from litestar import Controller, post
from litestar.di import Provide
from litestar.openapi import ResponseSpec
from litestar.params import Dependency

from company_chat.domain.accounts.deps import provide_user_groups_service
from company_chat.domain.chat import urls
from company_chat.domain.chat.deps import provide_chat_middlewares, provide_chat_service, provide_quota_resolver
from company_chat.domain.chat.pipeline import ChatRequest
from company_chat.domain.chat.schemas import ChatRequestSchema, ChatResponseSchema, QuotaExceededResponse
from company_chat.domain.usage.deps import provide_usage_service

if TYPE_CHECKING:
    from company_chat.db import models as m
    from company_chat.domain.chat.services import ChatService

__all__ = ("ChatController",)


class ChatController(Controller):
    """Chat completions, subject to the monthly token quotas."""

    tags = ["Chat"]
    dependencies = {
        "usage_service": Provide(provide_usage_service),
        "user_groups_service": Provide(provide_user_groups_service),
        "quota_resolver": Provide(provide_quota_resolver),
        "chat_middlewares": Provide(provide_chat_middlewares),
        "chat_service": Provide(provide_chat_service),
    }

    @post(
        operation_id="Chat",
        path=urls.CHAT_COMPLETE,
        responses={
            429: ResponseSpec(data_container=QuotaExceededResponse, description="Monthly token limit exceeded"),
        },
    )
    async def chat(
        self,
        current_user: m.User,
        data: ChatRequestSchema,
        chat_service: Annotated[ChatService, Dependency(skip_validation=True)],
    ) -> ChatResponseSchema:
        """Send messages to the model.

        Responds with ``429 Too Many Requests`` when the monthly token limit of
        the user's group or of the user is used up.
        """
        result = await chat_service.chat(
            current_user,
            ChatRequest(messages=data.to_messages(), model=data.model, conversation_id=data.conversation_id),
        )
        return ChatResponseSchema(
            content=result.content,
            model=result.model,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            conversation_id=data.conversation_id,
        )
