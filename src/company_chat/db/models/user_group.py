from __future__ import annotations

from typing import Final
from uuid import UUID

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

BUILTIN_USER_GROUP_ADMIN: Final = UUID("00000000-0000-4000-8000-000000000001")
BUILTIN_USER_GROUP_DEFAULT: Final = UUID("00000000-0000-4000-8000-000000000002")
BUILTIN_USER_GROUP_IDS: Final = frozenset({BUILTIN_USER_GROUP_ADMIN, BUILTIN_USER_GROUP_DEFAULT})


class UserGroup(UUIDAuditBase):
    """Quota-bearing group of users."""

    __tablename__ = "user_group"
    __table_args__ = {"comment": "User groups with monthly token quotas"}

    name: Mapped[str] = mapped_column(String(length=100), nullable=False, unique=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_built_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # <0 unlimited, 0 depends on the zero-limit policy, >0 hard cap per user
    monthly_user_tokens: Mapped[int] = mapped_column(
        Integer,
        default=-1,
        nullable=False,
        comment="Monthly token limit for every member of the group",
    )
    # Group-wide cap; NULL when the group only carries a per-user cap
    monthly_tokens: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        default=None,
        comment="Monthly token limit for the whole group",
    )
