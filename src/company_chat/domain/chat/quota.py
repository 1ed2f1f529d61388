"""Monthly quota policies derived from a user's group memberships."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from company_chat.db import models as m
from company_chat.lib.exceptions import QuotaScope

if TYPE_CHECKING:
    from uuid import UUID

    from company_chat.domain.accounts.services import UserGroupService
    from company_chat.domain.chat.pipeline import ChatUser

__all__ = (
    "QuotaCap",
    "QuotaPolicy",
    "QuotaPolicyResolver",
    "QuotaScope",
)


@dataclass(frozen=True, slots=True)
class QuotaCap:
    """A monthly limit on one scope.

    ``limit < 0`` never limits. ``limit == 0`` limits only when the zero-limit
    policy blocks, in which case any usage (even none) exceeds it.
    """

    scope: QuotaScope
    limit: int

    def is_enforced(self, zero_limit_blocks: bool = False) -> bool:
        if self.limit < 0:
            return False
        if self.limit == 0:
            return zero_limit_blocks
        return True


@dataclass(frozen=True, slots=True)
class QuotaPolicy:
    """Caps that apply to a user, evaluated group scope first."""

    UNLIMITED: ClassVar[QuotaPolicy]

    group_id: UUID | None
    caps: tuple[QuotaCap, ...] = ()

    @classmethod
    def unlimited(cls) -> QuotaPolicy:
        return cls.UNLIMITED

    @property
    def is_unlimited(self) -> bool:
        return not self.caps

    def enforced_caps(self, zero_limit_blocks: bool = False) -> tuple[QuotaCap, ...]:
        return tuple(cap for cap in self.caps if cap.is_enforced(zero_limit_blocks))

    def get_cap(self, scope: QuotaScope) -> QuotaCap | None:
        return next((cap for cap in self.caps if cap.scope == scope), None)


QuotaPolicy.UNLIMITED = QuotaPolicy(group_id=None)


class QuotaPolicyResolver:
    """Resolves the quota policy of a user from the first of its groups.

    Only the first group id counts; further memberships are ignored. Members of
    the built-in admin or default group, users without groups and users whose
    first group does not exist are not limited.
    """

    def __init__(self, user_groups_service: UserGroupService) -> None:
        self.user_groups_service = user_groups_service

    async def resolve(self, user: ChatUser | m.User) -> QuotaPolicy:
        user_group_ids = list(user.user_group_ids)
        if any(group_id in m.BUILTIN_USER_GROUP_IDS for group_id in user_group_ids):
            return QuotaPolicy.unlimited()
        if not user_group_ids:
            return QuotaPolicy.unlimited()

        user_group_id = user_group_ids[0]
        user_group = await self.user_groups_service.get_one_or_none(id=user_group_id)
        if user_group is None or user_group.is_admin:
            return QuotaPolicy.unlimited()

        caps: list[QuotaCap] = []
        if user_group.monthly_tokens is not None:
            caps.append(QuotaCap(scope=QuotaScope.GROUP, limit=user_group.monthly_tokens))
        caps.append(QuotaCap(scope=QuotaScope.USER, limit=user_group.monthly_user_tokens))
        return QuotaPolicy(group_id=user_group.id, caps=tuple(caps))
