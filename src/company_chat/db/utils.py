from __future__ import annotations

from typing import TYPE_CHECKING

from advanced_alchemy.base import UUIDAuditBase

from company_chat.db import models  # noqa: F401

if TYPE_CHECKING:
    from advanced_alchemy.extensions.litestar import SQLAlchemyAsyncConfig

__all__ = ("bootstrap_user_groups", "create_tables")


async def create_tables(alchemy: SQLAlchemyAsyncConfig) -> None:
    async with alchemy.get_engine().begin() as conn:
        await conn.run_sync(UUIDAuditBase.registry.metadata.create_all)


async def bootstrap_user_groups(alchemy: SQLAlchemyAsyncConfig) -> list[models.UserGroup]:
    """Create missing tables and the built-in user groups."""
    from company_chat.domain.accounts.services import UserGroupService

    await create_tables(alchemy)
    async with alchemy.get_session() as db_session:
        groups = await UserGroupService(session=db_session).ensure_builtin_groups()
        await db_session.commit()
    return groups
