"""Usage ledger model for token accounting."""

from __future__ import annotations

import datetime  # noqa: TC003
from uuid import UUID  # noqa: TC003

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import BigInteger, Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column


class UsageRecord(UUIDAuditBase):
    """Daily aggregated consumption per (date, user, counter, key, sub_key)."""

    __tablename__ = "usage_record"
    __table_args__ = (
        UniqueConstraint("date", "user_id", "counter", "key", "sub_key", name="uq_usage_record_identity"),
        Index("idx_usage_record_user_date", "user_id", "date"),
        {"comment": "Aggregated usage counters per user and day"},
    )

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    counter: Mapped[str] = mapped_column(String(length=50), nullable=False, comment="Metric name, e.g. token_count")
    key: Mapped[str] = mapped_column(String(length=100), nullable=False, default="")
    sub_key: Mapped[str] = mapped_column(String(length=100), nullable=False, default="")
    count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
