"""User Group Controllers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

from litestar import Controller, delete, get, patch, post
from litestar.di import Provide
from litestar.params import Dependency, Parameter

from company_chat.domain.accounts import urls
from company_chat.domain.accounts.deps import provide_user_groups_service
from company_chat.domain.accounts.guards import requires_admin
from company_chat.domain.accounts.schemas import UserGroup, UserGroupCreate, UserGroupUpdate
from company_chat.lib.deps import create_filter_dependencies

if TYPE_CHECKING:
    from advanced_alchemy.filters import FilterTypes
    from advanced_alchemy.service import OffsetPagination

    from company_chat.domain.accounts.services import UserGroupService


class UserGroupController(Controller):
    """Manage user groups and their monthly quotas."""

    tags = ["User Groups"]
    guards = [requires_admin]
    dependencies = {"user_groups_service": Provide(provide_user_groups_service)} | create_filter_dependencies(
        {
            "id_filter": UUID,
            "search": "name",
            "pagination_type": "limit_offset",
            "pagination_size": 50,
            "sort_field": "name",
            "sort_order": "asc",
        },
    )

    @get(operation_id="ListUserGroups", path=urls.USER_GROUP_LIST)
    async def list_user_groups(
        self,
        user_groups_service: UserGroupService,
        filters: Annotated[list[FilterTypes], Dependency(skip_validation=True)],
    ) -> OffsetPagination[UserGroup]:
        """List user groups."""
        results, total = await user_groups_service.list_and_count(*filters)
        return user_groups_service.to_schema(data=results, total=total, schema_type=UserGroup, filters=filters)

    @get(operation_id="GetUserGroup", path=urls.USER_GROUP_DETAIL)
    async def get_user_group(
        self,
        user_groups_service: UserGroupService,
        user_group_id: Annotated[UUID, Parameter(title="User Group ID", description="The user group to retrieve.")],
    ) -> UserGroup:
        """Get a user group."""
        db_obj = await user_groups_service.get(user_group_id)
        return user_groups_service.to_schema(data=db_obj, schema_type=UserGroup)

    @post(operation_id="CreateUserGroup", path=urls.USER_GROUP_CREATE)
    async def create_user_group(self, user_groups_service: UserGroupService, data: UserGroupCreate) -> UserGroup:
        """Create a user group."""
        db_obj = await user_groups_service.create(data.to_dict())
        return user_groups_service.to_schema(data=db_obj, schema_type=UserGroup)

    @patch(operation_id="UpdateUserGroup", path=urls.USER_GROUP_UPDATE)
    async def update_user_group(
        self,
        data: UserGroupUpdate,
        user_groups_service: UserGroupService,
        user_group_id: Annotated[UUID, Parameter(title="User Group ID", description="The user group to update.")],
    ) -> UserGroup:
        """Update a user group."""
        db_obj = await user_groups_service.update_group(user_group_id, data.to_dict())
        return user_groups_service.to_schema(data=db_obj, schema_type=UserGroup)

    @delete(operation_id="DeleteUserGroup", path=urls.USER_GROUP_DELETE)
    async def delete_user_group(
        self,
        user_groups_service: UserGroupService,
        user_group_id: Annotated[UUID, Parameter(title="User Group ID", description="The user group to delete.")],
    ) -> None:
        """Delete a user group. Built-in groups cannot be deleted."""
        _ = await user_groups_service.delete_group(user_group_id)
