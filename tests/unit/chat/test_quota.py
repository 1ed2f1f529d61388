from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from company_chat.db import models as m
from company_chat.domain.chat.pipeline import ChatUser
from company_chat.domain.chat.quota import QuotaCap, QuotaPolicy, QuotaPolicyResolver
from company_chat.lib.exceptions import QuotaScope

if TYPE_CHECKING:
    from company_chat.domain.accounts.services import UserGroupService

pytestmark = pytest.mark.anyio


@pytest.mark.parametrize(
    ("limit", "zero_limit_blocks", "enforced"),
    [
        (-1, False, False),
        (-1, True, False),
        (0, False, False),
        (0, True, True),
        (1, False, True),
        (1_000_000, True, True),
    ],
)
async def test_cap_enforcement(limit: int, zero_limit_blocks: bool, enforced: bool) -> None:
    assert QuotaCap(scope=QuotaScope.USER, limit=limit).is_enforced(zero_limit_blocks) is enforced


async def test_unlimited_policy_has_no_caps() -> None:
    policy = QuotaPolicy.unlimited()

    assert policy.is_unlimited
    assert policy.group_id is None
    assert policy.enforced_caps(zero_limit_blocks=True) == ()
    assert policy.get_cap(QuotaScope.USER) is None


async def test_enforced_caps_keep_group_first() -> None:
    group_cap = QuotaCap(scope=QuotaScope.GROUP, limit=10)
    user_cap = QuotaCap(scope=QuotaScope.USER, limit=-1)
    policy = QuotaPolicy(group_id=uuid4(), caps=(group_cap, user_cap))

    assert policy.enforced_caps() == (group_cap,)
    assert policy.get_cap(QuotaScope.USER) is user_cap


async def test_resolve_builtin_and_missing_groups(user_groups_service: UserGroupService) -> None:
    resolver = QuotaPolicyResolver(user_groups_service)
    limited = await user_groups_service.create({"name": "limited", "monthly_user_tokens": 5})

    assert (await resolver.resolve(ChatUser(id=uuid4()))).is_unlimited
    assert (await resolver.resolve(ChatUser(id=uuid4(), user_group_ids=(uuid4(),)))).is_unlimited
    assert (
        await resolver.resolve(ChatUser(id=uuid4(), user_group_ids=(limited.id, m.BUILTIN_USER_GROUP_DEFAULT)))
    ).is_unlimited
    assert (
        await resolver.resolve(ChatUser(id=uuid4(), user_group_ids=(m.BUILTIN_USER_GROUP_ADMIN,)))
    ).is_unlimited


async def test_resolve_per_user_cap_only(user_groups_service: UserGroupService) -> None:
    group = await user_groups_service.create({"name": "team", "monthly_user_tokens": 500})

    policy = await QuotaPolicyResolver(user_groups_service).resolve(ChatUser(id=uuid4(), user_group_ids=(group.id,)))

    assert policy.group_id == group.id
    assert policy.caps == (QuotaCap(scope=QuotaScope.USER, limit=500),)


async def test_resolve_group_and_user_caps(user_groups_service: UserGroupService) -> None:
    group = await user_groups_service.create({"name": "shared", "monthly_tokens": 10_000, "monthly_user_tokens": -1})

    policy = await QuotaPolicyResolver(user_groups_service).resolve(ChatUser(id=uuid4(), user_group_ids=(group.id,)))

    assert policy.caps == (
        QuotaCap(scope=QuotaScope.GROUP, limit=10_000),
        QuotaCap(scope=QuotaScope.USER, limit=-1),
    )
    assert [cap.scope for cap in policy.enforced_caps()] == [QuotaScope.GROUP]


async def test_resolve_new_group_defaults_to_unlimited(user_groups_service: UserGroupService) -> None:
    group = await user_groups_service.create({"name": "fresh"})

    policy = await QuotaPolicyResolver(user_groups_service).resolve(ChatUser(id=uuid4(), user_group_ids=(group.id,)))

    assert policy.enforced_caps(zero_limit_blocks=True) == ()
