"""Rejects chat requests of users who used up their monthly tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from company_chat.lib.exceptions import QuotaExceededException, QuotaScope
from company_chat.lib.usage_window import current_month_window, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from company_chat.domain.chat.pipeline import ChatContext, ChatNextDelegate, ChatResult
    from company_chat.domain.chat.quota import QuotaPolicyResolver
    from company_chat.domain.usage.services import UsageService

__all__ = ("CheckUsageMiddleware",)

logger = structlog.get_logger()


class CheckUsageMiddleware:
    """Enforces the monthly caps of the user's quota policy.

    Runs before every cost-incurring stage. The check only reads the usage
    ledger; consumption is recorded after the model call. Two concurrent
    requests near the cap can both pass before either is recorded.
    """

    order = -1000

    def __init__(
        self,
        resolver: QuotaPolicyResolver,
        usage_service: UsageService,
        *,
        zero_limit_blocks: bool = False,
        counter: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.resolver = resolver
        self.usage_service = usage_service
        self.zero_limit_blocks = zero_limit_blocks
        self.counter = counter
        self.clock = clock

    async def invoke(self, context: ChatContext, next_: ChatNextDelegate) -> ChatResult:
        user = context.user
        policy = await self.resolver.resolve(user)
        caps = policy.enforced_caps(self.zero_limit_blocks)
        if not caps:
            return await next_(context)

        window = current_month_window(self.clock())
        for cap in caps:
            owner: dict[str, Any] = (
                {"group_id": policy.group_id} if cap.scope is QuotaScope.GROUP else {"user_id": user.id}
            )
            usage = await self.usage_service.sum_usage(
                window.date_from,
                window.date_to,
                counter=self.counter,
                **owner,
            )
            if usage >= cap.limit:
                await logger.awarning(
                    "Monthly token limit exceeded",
                    user_id=str(user.id),
                    user_group_id=str(policy.group_id),
                    scope=cap.scope.value,
                    usage=usage,
                    limit=cap.limit,
                )
                raise QuotaExceededException(
                    scope=cap.scope,
                    user_id=user.id,
                    current_usage=usage,
                    monthly_limit=cap.limit,
                    reset_date=window.reset_date,
                )

        return await next_(context)
