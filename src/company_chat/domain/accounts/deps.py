"""User Account dependency providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import joinedload, selectinload

from company_chat.db import models as m
from company_chat.domain.accounts.services import UserGroupService, UserService
from company_chat.lib.deps import create_service_provider

if TYPE_CHECKING:
    from litestar import Request

# create a hard reference to this since it's used often
provide_users_service = create_service_provider(
    UserService,
    load=[
        selectinload(m.User.memberships).options(joinedload(m.UserGroupMembership.user_group, innerjoin=True)),
    ],
    error_messages={"duplicate_key": "This user already exists.", "integrity": "User operation failed."},
)

provide_user_groups_service = create_service_provider(
    UserGroupService,
    error_messages={
        "duplicate_key": "A user group with this name already exists.",
        "integrity": "User group operation failed.",
    },
)


async def provide_user(request: Request[m.User, Any, Any]) -> m.User:
    """Get the user from the request.

    Args:
        request: current Request.

    Returns:
        User
    """
    return request.user
