"""Services for users and user groups."""

from __future__ import annotations

import hashlib
import secrets
from typing import TYPE_CHECKING, Any

import structlog
from advanced_alchemy.repository import SQLAlchemyAsyncRepository
from advanced_alchemy.service import SQLAlchemyAsyncRepositoryService

from company_chat.db import models as m
from company_chat.lib.exceptions import ConflictError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

__all__ = (
    "UserGroupService",
    "UserService",
    "generate_api_key",
    "hash_api_key",
)

logger = structlog.get_logger()

BUILTIN_USER_GROUPS: dict[UUID, dict[str, Any]] = {
    m.BUILTIN_USER_GROUP_ADMIN: {"name": "Admin", "is_admin": True},
    m.BUILTIN_USER_GROUP_DEFAULT: {"name": "Default", "is_admin": False},
}


def generate_api_key() -> str:
    return secrets.token_urlsafe(32)


def hash_api_key(api_key: str) -> str:
    """API keys are stored as sha256 hex digests only."""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


class UserGroupService(SQLAlchemyAsyncRepositoryService[m.UserGroup]):
    """Handles database operations for user groups."""

    class Repository(SQLAlchemyAsyncRepository[m.UserGroup]):
        """UserGroup SQLAlchemy Repository."""

        model_type = m.UserGroup

    repository_type = Repository
    match_fields = ["name"]

    async def ensure_builtin_groups(self) -> list[m.UserGroup]:
        """Create the built-in admin and default groups when they are missing."""
        groups: list[m.UserGroup] = []
        for group_id, values in BUILTIN_USER_GROUPS.items():
            group = await self.get_one_or_none(id=group_id)
            if group is None:
                group = await self.create(
                    m.UserGroup(
                        id=group_id,
                        is_built_in=True,
                        monthly_user_tokens=-1,
                        monthly_tokens=None,
                        **values,
                    ),
                )
                await logger.ainfo("Created built-in user group", user_group_id=str(group_id), name=group.name)
            groups.append(group)
        return groups

    async def update_group(self, user_group_id: UUID, data: dict[str, Any]) -> m.UserGroup:
        group = await self.get(user_group_id)
        if group.is_built_in and "is_admin" in data and data["is_admin"] != group.is_admin:
            msg = "The admin flag of built-in user groups cannot be changed."
            raise ConflictError(msg)
        return await self.update(item_id=user_group_id, data=data)

    async def delete_group(self, user_group_id: UUID) -> m.UserGroup:
        group = await self.get(user_group_id)
        if group.is_built_in:
            msg = "Built-in user groups cannot be deleted."
            raise ConflictError(msg)
        return await self.delete(user_group_id)


class UserService(SQLAlchemyAsyncRepositoryService[m.User]):
    """Handles database operations for users."""

    class Repository(SQLAlchemyAsyncRepository[m.User]):
        """User SQLAlchemy Repository."""

        model_type = m.User

    repository_type = Repository
    match_fields = ["email"]

    async def get_by_api_key(self, api_key: str) -> m.User | None:
        return await self.get_one_or_none(api_key_hash=hash_api_key(api_key))

    async def create_user(self, data: dict[str, Any]) -> tuple[m.User, str | None]:
        """Create a user and its ordered group memberships.

        Args:
            data: ``name``, ``email``, optional ``user_group_ids`` and ``generate_api_key``.
                Users created without ``user_group_ids`` join the default group.

        Returns:
            The user and the plain API key, when one was generated.
        """
        data = dict(data)
        user_group_ids = data.pop("user_group_ids", None)
        if user_group_ids is None:
            user_group_ids = [m.BUILTIN_USER_GROUP_DEFAULT]
        api_key = generate_api_key() if data.pop("generate_api_key", False) else None

        user = m.User(name=data["name"], email=data["email"])
        if api_key is not None:
            user.api_key_hash = hash_api_key(api_key)
        user.memberships = [
            m.UserGroupMembership(user_group_id=group_id, position=position)
            for position, group_id in enumerate(_unique(user_group_ids))
        ]
        user = await self.create(user)
        return user, api_key

    async def update_user(self, user_id: UUID, data: dict[str, Any]) -> tuple[m.User, str | None]:
        """Update a user. Passing ``user_group_ids`` replaces the memberships, keeping their order."""
        data = dict(data)
        user = await self.get(user_id)
        user_group_ids = data.pop("user_group_ids", None)
        api_key = generate_api_key() if data.pop("generate_api_key", False) else None

        for field_name in ("name", "email"):
            if field_name in data and data[field_name] is not None:
                setattr(user, field_name, data[field_name])
        if api_key is not None:
            user.api_key_hash = hash_api_key(api_key)
        if user_group_ids is not None:
            # Reuse existing rows so the (user, group) unique constraint holds during the flush
            existing = {membership.user_group_id: membership for membership in user.memberships}
            memberships: list[m.UserGroupMembership] = []
            for position, group_id in enumerate(_unique(user_group_ids)):
                membership = existing.get(group_id) or m.UserGroupMembership(user_group_id=group_id)
                membership.position = position
                memberships.append(membership)
            user.memberships = memberships

        user = await self.update(user)
        return user, api_key


def _unique(ids: Sequence[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))
