"""Calendar-month windows used for quota accounting."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import NamedTuple

from company_chat.lib.exceptions import QuotaScope  # noqa: TC001

__all__ = (
    "MonthWindow",
    "UsageStats",
    "current_month_window",
    "month_window",
    "utcnow",
)


class MonthWindow(NamedTuple):
    """Half-open range ``[date_from, date_to)`` covering one calendar month."""

    date_from: date
    date_to: date

    @property
    def month(self) -> str:
        """Month in YYYY-MM format."""
        return self.date_from.strftime("%Y-%m")

    @property
    def reset_date(self) -> datetime:
        """First instant of the following month, when the quota resets."""
        return datetime(self.date_to.year, self.date_to.month, 1, tzinfo=UTC)

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        if isinstance(day, datetime):
            day = day.date()
        return self.date_from <= day < self.date_to


class UsageStats(NamedTuple):
    """Usage statistics for a user."""

    current_month: str
    usage_count: int
    monthly_limit: int
    remaining_quota: int | None
    reset_date: datetime
    limit_scope: QuotaScope | None = None


def utcnow() -> datetime:
    return datetime.now(UTC)


def month_window(day: date) -> MonthWindow:
    """Get the calendar month containing ``day``.

    Args:
        day: Any day (or datetime) inside the month.

    Returns:
        The window from the first day of that month to the first day of the next one.
    """
    date_from = date(day.year, day.month, 1)
    # Calculate next month
    if day.month == 12:
        date_to = date(day.year + 1, 1, 1)
    else:
        date_to = date(day.year, day.month + 1, 1)
    return MonthWindow(date_from=date_from, date_to=date_to)


def current_month_window(now: datetime | None = None) -> MonthWindow:
    """Get the month window for ``now`` (defaults to the current UTC time)."""
    now = now or utcnow()
    if now.tzinfo is not None:
        now = now.astimezone(UTC)
    return month_window(now.date())
