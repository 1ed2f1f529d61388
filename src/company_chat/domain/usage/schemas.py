"""Schemas for usage domain."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from uuid import UUID  # noqa: TC003

from pydantic import Field

from company_chat.domain.accounts.schemas import PydanticBaseModel
from company_chat.lib.exceptions import QuotaScope  # noqa: TC001

__all__ = ("GroupUsageResponse", "UsageStatsResponse")


class UsageStatsResponse(PydanticBaseModel):
    """Response schema for usage statistics."""

    user_id: UUID
    current_month: str = Field(..., description="Current month in YYYY-MM format")
    usage_count: int = Field(..., description="Tokens used this month")
    monthly_limit: int = Field(..., description="Tokens allowed per month, negative for unlimited")
    remaining_quota: int | None = Field(None, description="Tokens remaining this month, null when unlimited")
    reset_date: datetime = Field(..., description="When the quota resets")
    limit_scope: QuotaScope | None = Field(
        None,
        description="Cap the limit and remaining quota refer to, null when unlimited",
    )


class GroupUsageResponse(PydanticBaseModel):
    """Monthly usage of all members of a user group."""

    user_group_id: UUID
    current_month: str = Field(..., description="Current month in YYYY-MM format")
    usage_count: int = Field(..., description="Tokens used this month by all members")
    monthly_tokens: int | None = Field(None, description="Group-wide monthly limit, if any")
    monthly_user_tokens: int = Field(..., description="Per-user monthly limit")
    reset_date: datetime = Field(..., description="When the quota resets")
