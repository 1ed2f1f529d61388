"""User Account Controllers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import structlog
from litestar import Controller, delete, get, patch, post
from litestar.di import Provide
from litestar.params import Dependency, Parameter

from company_chat.domain.accounts import urls
from company_chat.domain.accounts.deps import provide_users_service
from company_chat.domain.accounts.guards import requires_admin
from company_chat.domain.accounts.schemas import User, UserCreate, UserUpdate, UserWithApiKey
from company_chat.lib.deps import create_filter_dependencies

if TYPE_CHECKING:
    from advanced_alchemy.filters import FilterTypes
    from advanced_alchemy.service import OffsetPagination

    from company_chat.db import models as m
    from company_chat.domain.accounts.services import UserService

logger = structlog.get_logger()


class UserController(Controller):
    """User Account Controller."""

    tags = ["User Accounts"]
    dependencies = {"users_service": Provide(provide_users_service)} | create_filter_dependencies(
        {
            "id_filter": UUID,
            "search": "name,email",
            "pagination_type": "limit_offset",
            "pagination_size": 20,
            "created_at": True,
            "updated_at": True,
            "sort_field": "name",
            "sort_order": "asc",
        },
    )

    @get(operation_id="AccountProfile", path=urls.ACCOUNT_PROFILE)
    async def profile(self, current_user: m.User, users_service: UserService) -> User:
        """User Profile."""
        return users_service.to_schema(data=current_user, schema_type=User)

    @get(operation_id="ListUsers", path=urls.USER_LIST, guards=[requires_admin])
    async def list_users(
        self,
        users_service: UserService,
        filters: Annotated[list[FilterTypes], Dependency(skip_validation=True)],
    ) -> OffsetPagination[User]:
        """List users."""
        results, total = await users_service.list_and_count(*filters)
        return users_service.to_schema(data=results, total=total, schema_type=User, filters=filters)

    @get(operation_id="GetUser", path=urls.USER_DETAIL, guards=[requires_admin])
    async def get_user(
        self,
        users_service: UserService,
        user_id: Annotated[UUID, Parameter(title="User ID", description="The user to retrieve.")],
    ) -> User:
        """Get a user."""
        db_obj = await users_service.get(user_id)
        return users_service.to_schema(data=db_obj, schema_type=User)

    @post(operation_id="CreateUser", path=urls.USER_CREATE, guards=[requires_admin])
    async def create_user(self, users_service: UserService, data: UserCreate) -> UserWithApiKey:
        """Create a new user."""
        db_obj, api_key = await users_service.create_user(data.to_dict())
        await logger.ainfo("Created user", user_id=str(db_obj.id), user_group_ids=[str(i) for i in db_obj.user_group_ids])
        result = users_service.to_schema(data=db_obj, schema_type=UserWithApiKey)
        result.api_key = api_key
        return result

    @patch(operation_id="UpdateUser", path=urls.USER_UPDATE, guards=[requires_admin])
    async def update_user(
        self,
        data: UserUpdate,
        users_service: UserService,
        user_id: Annotated[UUID, Parameter(title="User ID", description="The user to update.")],
    ) -> UserWithApiKey:
        """Update a user. ``userGroupIds`` replaces the memberships in the given order."""
        db_obj, api_key = await users_service.update_user(user_id, data.to_dict())
        result = users_service.to_schema(data=db_obj, schema_type=UserWithApiKey)
        result.api_key = api_key
        return result

    @delete(operation_id="DeleteUser", path=urls.USER_DELETE, guards=[requires_admin])
    async def delete_user(
        self,
        users_service: UserService,
        user_id: Annotated[UUID, Parameter(title="User ID", description="The user to delete.")],
    ) -> None:
        """Delete a user from the system."""
        _ = await users_service.delete(user_id)
