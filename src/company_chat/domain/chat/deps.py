"""Dependency providers for chat domain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from litestar.params import Dependency

from company_chat.config import get_settings
from company_chat.domain.chat.middlewares import CheckUsageMiddleware, LogChatMiddleware
from company_chat.domain.chat.quota import QuotaPolicyResolver
from company_chat.domain.chat.services import ChatService

if TYPE_CHECKING:
    from company_chat.domain.accounts.services import UserGroupService
    from company_chat.domain.chat.pipeline import ChatMiddleware
    from company_chat.domain.usage.services import UsageService

__all__ = ("provide_chat_middlewares", "provide_chat_service", "provide_quota_resolver")


async def provide_quota_resolver(
    user_groups_service: Annotated[UserGroupService, Dependency(skip_validation=True)],
) -> QuotaPolicyResolver:
    return QuotaPolicyResolver(user_groups_service)


async def provide_chat_middlewares(
    quota_resolver: Annotated[QuotaPolicyResolver, Dependency(skip_validation=True)],
    usage_service: Annotated[UsageService, Dependency(skip_validation=True)],
) -> list[ChatMiddleware]:
    """Registration list of the chat pipeline stages.

    The pipeline sorts them by ``order``; the list order only breaks ties.
    """
    settings = get_settings()
    return [
        CheckUsageMiddleware(
            quota_resolver,
            usage_service,
            zero_limit_blocks=settings.quota.ZERO_LIMIT_BLOCKS,
            counter=settings.quota.USAGE_COUNTER,
        ),
        LogChatMiddleware(),
    ]


async def provide_chat_service(
    usage_service: Annotated[UsageService, Dependency(skip_validation=True)],
    chat_middlewares: Annotated[list[ChatMiddleware], Dependency(skip_validation=True)],
) -> ChatService:
    """Dependency provider for ChatService.

    Args:
        usage_service: UsageService instance recording token consumption
        chat_middlewares: Pipeline stages run before the model

    Returns:
        Configured ChatService instance
    """
    settings = get_settings()
    return ChatService(
        usage_service,
        chat_middlewares,
        model=settings.ai.MODEL,
        instructions=settings.ai.INSTRUCTIONS,
        agent_name=settings.ai.AGENT_NAME,
        max_turns=settings.ai.MAX_TURNS,
        usage_counter=settings.quota.USAGE_COUNTER,
    )
