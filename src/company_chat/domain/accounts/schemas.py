from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

__all__ = (
    "PydanticBaseModel",
    "User",
    "UserCreate",
    "UserGroup",
    "UserGroupCreate",
    "UserGroupUpdate",
    "UserUpdate",
    "UserWithApiKey",
)


class PydanticBaseModel(BaseModel):
    """Base model with camel case config."""

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class UserGroup(PydanticBaseModel):
    """User group properties to use for a response."""

    id: UUID
    name: str
    is_admin: bool = False
    is_built_in: bool = False
    monthly_user_tokens: int = -1
    monthly_tokens: int | None = None
    created_at: datetime
    updated_at: datetime


class UserGroupCreate(PydanticBaseModel):
    name: str = Field(min_length=1, max_length=100)
    is_admin: bool = False
    monthly_user_tokens: int = Field(default=-1, description="Per-user monthly tokens, negative for unlimited")
    monthly_tokens: int | None = Field(default=None, description="Group-wide monthly tokens, null for no group cap")


class UserGroupUpdate(PydanticBaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    is_admin: bool | None = None
    monthly_user_tokens: int | None = None
    monthly_tokens: int | None = None


class User(PydanticBaseModel):
    """User properties to use for a response."""

    id: UUID
    name: str
    email: str
    user_group_ids: list[UUID] = Field(default_factory=list)
    has_api_key: bool = False
    created_at: datetime
    updated_at: datetime


class UserWithApiKey(User):
    """Returned once, right after an API key was generated."""

    api_key: str | None = None


class UserCreate(PydanticBaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    user_group_ids: list[UUID] | None = Field(
        default=None,
        description="Ordered group memberships; the first group decides the quota",
    )
    generate_api_key: bool = False


class UserUpdate(PydanticBaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    user_group_ids: list[UUID] | None = None
    generate_api_key: bool = False
