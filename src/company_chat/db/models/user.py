from __future__ import annotations

from typing import TYPE_CHECKING

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from uuid import UUID

    from .user_group_membership import UserGroupMembership


class User(UUIDAuditBase):
    __tablename__ = "user_account"
    __table_args__ = {"comment": "User accounts"}
    __pii_columns__ = {"name", "email"}

    name: Mapped[str] = mapped_column(String(length=100), nullable=False)
    email: Mapped[str] = mapped_column(String(length=100), unique=True, index=True, nullable=False)
    api_key_hash: Mapped[str | None] = mapped_column(String(length=64), unique=True, nullable=True, default=None)

    # -----------
    # ORM Relationships
    # ------------
    memberships: Mapped[list[UserGroupMembership]] = relationship(
        back_populates="user",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="UserGroupMembership.position",
    )

    @property
    def user_group_ids(self) -> list[UUID]:
        """Group ids in membership order. The first one decides the quota."""
        return [membership.user_group_id for membership in self.memberships]

    @property
    def has_api_key(self) -> bool:
        return self.api_key_hash is not None

    @property
    def is_admin(self) -> bool:
        return any(membership.user_group_is_admin for membership in self.memberships)
