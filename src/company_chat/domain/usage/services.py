"""Service for the usage ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

from advanced_alchemy.repository import SQLAlchemyAsyncRepository
from advanced_alchemy.service import SQLAlchemyAsyncRepositoryService
from sqlalchemy import func, select, update

from company_chat.db import models as m
from company_chat.lib.exceptions import QuotaScope
from company_chat.lib.usage_window import UsageStats, current_month_window, utcnow

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from company_chat.domain.chat.quota import QuotaPolicy

__all__ = ("UsageService",)


class UsageService(SQLAlchemyAsyncRepositoryService[m.UsageRecord]):
    """Handles database operations for usage records."""

    class Repository(SQLAlchemyAsyncRepository[m.UsageRecord]):
        """UsageRecord SQLAlchemy Repository."""

        model_type = m.UsageRecord

    repository_type = Repository
    match_fields = ["date", "user_id", "counter", "key", "sub_key"]

    async def track(
        self,
        user_id: UUID,
        counter: str,
        count: int,
        *,
        key: str = "",
        sub_key: str = "",
        on: date | None = None,
    ) -> m.UsageRecord:
        """Add ``count`` to the record identified by (date, user, counter, key, sub_key).

        Args:
            user_id: UUID of the consuming user
            counter: Metric name
            count: Amount to add
            key: First free-form dimension, e.g. the model name
            sub_key: Second free-form dimension, e.g. ``input`` or ``output``
            on: Day to book the usage on (defaults to today, UTC)

        Returns:
            The aggregated UsageRecord
        """
        day = on or utcnow().date()
        identity = {"date": day, "user_id": user_id, "counter": counter, "key": key, "sub_key": sub_key}

        # Increment in the database so concurrent requests do not lose updates
        statement = (
            update(m.UsageRecord)
            .where(*(getattr(m.UsageRecord, column) == value for column, value in identity.items()))
            .values(count=m.UsageRecord.count + count)
            .execution_options(synchronize_session=False)
        )
        result = await self.repository.session.execute(statement)
        if result.rowcount:
            record = await self.get_one(**identity)
            await self.repository.session.refresh(record)
            return record

        return await self.create({**identity, "count": count})

    async def sum_usage(
        self,
        date_from: date,
        date_to: date,
        *,
        user_id: UUID | None = None,
        group_id: UUID | None = None,
        counter: str | None = None,
    ) -> int:
        """Sum recorded usage within ``[date_from, date_to)`` for one user or one group.

        Group sums join through the current group memberships; usage rows do not
        carry a group column.

        Args:
            date_from: First day included
            date_to: First day excluded
            user_id: Only count usage of this user
            group_id: Only count usage of members of this group
            counter: Only count this metric (all metrics when omitted)

        Raises:
            ValueError: Unless exactly one of ``user_id`` and ``group_id`` is given

        Returns:
            Summed count, 0 when nothing was recorded
        """
        if (user_id is None) == (group_id is None):
            msg = "Exactly one of user_id or group_id must be given."
            raise ValueError(msg)

        statement = select(func.coalesce(func.sum(m.UsageRecord.count), 0)).where(
            m.UsageRecord.date >= date_from,
            m.UsageRecord.date < date_to,
        )
        if user_id is not None:
            statement = statement.where(m.UsageRecord.user_id == user_id)
        else:
            members = select(m.UserGroupMembership.user_id).where(m.UserGroupMembership.user_group_id == group_id)
            statement = statement.where(m.UsageRecord.user_id.in_(members))
        if counter is not None:
            statement = statement.where(m.UsageRecord.counter == counter)

        result = await self.repository.session.execute(statement)
        return int(result.scalar_one() or 0)

    async def get_user_usage_stats(
        self,
        user_id: UUID,
        policy: QuotaPolicy,
        *,
        zero_limit_blocks: bool = False,
        counter: str | None = None,
        now: datetime | None = None,
    ) -> UsageStats:
        """Get current month usage statistics for a user.

        Limit and remaining quota follow the caps that are actually enforced.
        With a group and a user cap, the one with less quota left is reported.

        Args:
            user_id: UUID of the user
            policy: Quota policy resolved for the user
            zero_limit_blocks: Whether a zero cap blocks or is disabled
            counter: Only count this metric (all metrics when omitted)
            now: Reference time (defaults to the current UTC time)

        Returns:
            UsageStats object with current usage information
        """
        window = current_month_window(now)
        usage_count = await self.sum_usage(window.date_from, window.date_to, user_id=user_id, counter=counter)

        monthly_limit = -1
        remaining_quota: int | None = None
        limit_scope: QuotaScope | None = None
        for cap in policy.enforced_caps(zero_limit_blocks):
            if cap.scope is QuotaScope.GROUP:
                used = await self.sum_usage(
                    window.date_from,
                    window.date_to,
                    group_id=policy.group_id,
                    counter=counter,
                )
            else:
                used = usage_count
            remaining = max(0, cap.limit - used)
            if remaining_quota is None or remaining < remaining_quota:
                monthly_limit, remaining_quota, limit_scope = cap.limit, remaining, cap.scope

        return UsageStats(
            current_month=window.month,
            usage_count=usage_count,
            monthly_limit=monthly_limit,
            remaining_quota=remaining_quota,
            reset_date=window.reset_date,
            limit_scope=limit_scope,
        )
