"""Services for chat domain."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from agents import Agent, Runner

from company_chat.domain.chat.pipeline import ChatContext, ChatPipeline, ChatResult, ChatUser

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from company_chat.db import models as m
    from company_chat.domain.chat.pipeline import ChatMiddleware, ChatRequest
    from company_chat.domain.usage.services import UsageService

__all__ = ("ChatService",)

logger = structlog.get_logger()


class ChatService:
    """Runs chat requests through the middleware pipeline and the model.

    The model call is the terminal stage. Token consumption is recorded in the
    usage ledger once the call completed.
    """

    def __init__(
        self,
        usage_service: UsageService,
        middlewares: Iterable[ChatMiddleware] = (),
        *,
        model: str,
        instructions: str,
        agent_name: str = "CompanyChat",
        max_turns: int = 10,
        usage_counter: str = "token_count",
    ) -> None:
        """Initialize the service with required dependencies.

        Args:
            usage_service: Ledger receiving the token consumption
            middlewares: Stages to run before the model, in any order
            model: Model used when a request does not name one
            instructions: System instructions of the agent
            agent_name: Name of the agent
            max_turns: Maximum agent turns per request
            usage_counter: Counter under which tokens are recorded
        """
        self.usage_service = usage_service
        self.model = model
        self.instructions = instructions
        self.agent_name = agent_name
        self.max_turns = max_turns
        self.usage_counter = usage_counter
        self.pipeline = ChatPipeline(middlewares, self.invoke_model)

    async def chat(self, user: m.User | ChatUser, request: ChatRequest) -> ChatResult:
        """Send a chat request on behalf of ``user``.

        Raises:
            QuotaExceededException: If a monthly token limit of the user's group is used up
        """
        chat_user = user if isinstance(user, ChatUser) else ChatUser(id=user.id, user_group_ids=tuple(user.user_group_ids))
        return await self.pipeline(ChatContext(user=chat_user, request=request))

    async def invoke_model(self, context: ChatContext) -> ChatResult:
        model = context.request.model or self.model
        agent = Agent(name=self.agent_name, instructions=self.instructions, model=model)
        run = await Runner.run(agent, context.request.messages, max_turns=self.max_turns)  # type: ignore[arg-type]

        usage = run.context_wrapper.usage
        result = ChatResult(
            content=str(run.final_output),
            model=model,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
        )
        await self.record_usage(context.user.id, result)
        return result

    async def record_usage(self, user_id: UUID, result: ChatResult) -> None:
        """Book input and output tokens separately under the model's key."""
        for sub_key, count in (("input", result.input_tokens), ("output", result.output_tokens)):
            if count <= 0:
                continue
            await self.usage_service.track(
                user_id,
                self.usage_counter,
                count,
                key=result.model,
                sub_key=sub_key,
            )
        await logger.adebug(
            "Recorded token usage",
            user_id=str(user_id),
            model=result.model,
            total_tokens=result.total_tokens,
        )
