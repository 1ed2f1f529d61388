from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from .user import User
    from .user_group import UserGroup


class UserGroupMembership(UUIDAuditBase):
    """Links a user to a user group. ``position`` keeps the membership order."""

    __tablename__ = "user_account_user_group"
    __table_args__ = (
        UniqueConstraint("user_id", "user_group_id", name="uq_user_user_group"),
        {"comment": "Links a user to a user group."},
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("user_account.id", ondelete="cascade"), nullable=False, index=True)
    user_group_id: Mapped[UUID] = mapped_column(ForeignKey("user_group.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # -----------
    # ORM Relationships
    # ------------
    user: Mapped[User] = relationship(back_populates="memberships", innerjoin=True, uselist=False, lazy="select")
    user_group: Mapped[UserGroup] = relationship(innerjoin=True, uselist=False, lazy="joined")

    user_group_name: AssociationProxy[str] = association_proxy("user_group", "name")
    user_group_is_admin: AssociationProxy[bool] = association_proxy("user_group", "is_admin")
