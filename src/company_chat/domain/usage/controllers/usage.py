"""Controllers for usage domain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

from litestar import Controller, get
from litestar.di import Provide
from litestar.params import Dependency, Parameter

from company_chat.config import get_settings
from company_chat.domain.accounts.deps import provide_user_groups_service, provide_users_service
from company_chat.domain.accounts.guards import requires_admin
from company_chat.domain.chat.deps import provide_quota_resolver
from company_chat.domain.usage import urls
from company_chat.domain.usage.deps import provide_usage_service
from company_chat.domain.usage.schemas import GroupUsageResponse, UsageStatsResponse
from company_chat.lib.usage_window import current_month_window

if TYPE_CHECKING:
    from company_chat.db import models as m
    from company_chat.domain.accounts.services import UserGroupService, UserService
    from company_chat.domain.chat.quota import QuotaPolicyResolver
    from company_chat.domain.usage.services import UsageService

__all__ = ("UsageController",)


class UsageController(Controller):
    """Monthly token usage."""

    tags = ["Usage"]
    dependencies = {
        "usage_service": Provide(provide_usage_service),
        "users_service": Provide(provide_users_service),
        "user_groups_service": Provide(provide_user_groups_service),
        "quota_resolver": Provide(provide_quota_resolver),
    }

    @get(operation_id="GetMyUsage", path=urls.USAGE_ME)
    async def get_my_usage(
        self,
        current_user: m.User,
        usage_service: UsageService,
        quota_resolver: Annotated[QuotaPolicyResolver, Dependency(skip_validation=True)],
    ) -> UsageStatsResponse:
        """Get current month usage statistics for the current user."""
        return await _user_usage(current_user, usage_service, quota_resolver)

    @get(operation_id="GetUserUsage", path=urls.USAGE_USER, guards=[requires_admin])
    async def get_user_usage(
        self,
        usage_service: UsageService,
        users_service: UserService,
        quota_resolver: Annotated[QuotaPolicyResolver, Dependency(skip_validation=True)],
        user_id: Annotated[UUID, Parameter(title="User ID", description="The user to report on.")],
    ) -> UsageStatsResponse:
        """Get current month usage statistics for a user."""
        user = await users_service.get(user_id)
        return await _user_usage(user, usage_service, quota_resolver)

    @get(operation_id="GetUserGroupUsage", path=urls.USAGE_USER_GROUP, guards=[requires_admin])
    async def get_user_group_usage(
        self,
        usage_service: UsageService,
        user_groups_service: UserGroupService,
        user_group_id: Annotated[UUID, Parameter(title="User Group ID", description="The group to report on.")],
    ) -> GroupUsageResponse:
        """Get current month usage of all members of a user group."""
        user_group = await user_groups_service.get(user_group_id)
        window = current_month_window()
        usage_count = await usage_service.sum_usage(
            window.date_from,
            window.date_to,
            group_id=user_group.id,
            counter=get_settings().quota.USAGE_COUNTER,
        )
        return GroupUsageResponse(
            user_group_id=user_group.id,
            current_month=window.month,
            usage_count=usage_count,
            monthly_tokens=user_group.monthly_tokens,
            monthly_user_tokens=user_group.monthly_user_tokens,
            reset_date=window.reset_date,
        )


async def _user_usage(
    user: m.User,
    usage_service: UsageService,
    quota_resolver: QuotaPolicyResolver,
) -> UsageStatsResponse:
    settings = get_settings()
    policy = await quota_resolver.resolve(user)
    stats = await usage_service.get_user_usage_stats(
        user.id,
        policy,
        zero_limit_blocks=settings.quota.ZERO_LIMIT_BLOCKS,
        counter=settings.quota.USAGE_COUNTER,
    )
    return UsageStatsResponse(user_id=user.id, **stats._asdict())
