from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from company_chat.domain.accounts.services import UserGroupService, UserService
from company_chat.domain.usage.services import UsageService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
async def session() -> AsyncIterator[AsyncSession]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(UUIDAuditBase.registry.metadata.create_all)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session
    await engine.dispose()


@pytest.fixture()
async def user_groups_service(session: AsyncSession) -> UserGroupService:
    service = UserGroupService(session=session)
    await service.ensure_builtin_groups()
    return service


@pytest.fixture()
def users_service(session: AsyncSession) -> UserService:
    return UserService(session=session)


@pytest.fixture()
def usage_service(session: AsyncSession) -> UsageService:
    return UsageService(session=session)
