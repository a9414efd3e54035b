"""Calendar arithmetic for monthly repayment events.

Dates are compared as calendar dates only. Timestamps keep their written
year/month/day; no timezone conversion is applied, so an entry stamped
``2025-01-15T00:00:00Z`` always lands on January 15th.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime

from ..models.debt import DateLike


def to_date(value: DateLike) -> date:
    """Coerce an ISO 8601 string, ``date`` or ``datetime`` into a ``date``."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return datetime.fromisoformat(text).date()


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month.

    Args:
        year: Full year, e.g. 2025
        month: Zero-based month (0 = January, 11 = December)
    """
    return monthrange(year, month + 1)[1]


def effective_repayment_day(year: int, month: int, repayment_day: int) -> int:
    """Clamp ``repayment_day`` to the length of a zero-based month."""

    return min(repayment_day, days_in_month(year, month))


def months_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar months from ``start`` to ``end``; never negative."""

    start_date = to_date(start)
    end_date = to_date(end)
    months = (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month)
    return max(0, months)


def add_months(value: DateLike, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the target month's end."""

    current = to_date(value)
    index = current.year * 12 + (current.month - 1) + months
    year, month0 = divmod(index, 12)
    day = min(current.day, days_in_month(year, month0))
    return date(year, month0 + 1, day)


def count_repayments_due(entered_at: DateLike, repayment_day: int, now: DateLike | None = None) -> int:
    """Count repayment days that have been reached since the debt was entered.

    The entry month is included when the entry date is on or before that
    month's (clamped) repayment day; otherwise counting starts the month
    after. Every later month strictly before ``now``'s month counts; ``now``'s
    own month counts once its clamped repayment day has been reached.
    """

    entry = to_date(entered_at)
    today = to_date(now) if now is not None else date.today()

    year = entry.year
    month = entry.month - 1  # zero-based
    if entry.day > effective_repayment_day(year, month, repayment_day):
        month += 1
        if month > 11:
            month = 0
            year += 1

    now_month = today.month - 1
    count = 0
    while (year, month) < (today.year, now_month):
        count += 1
        month += 1
        if month > 11:
            month = 0
            year += 1

    if (year, month) == (today.year, now_month):
        if today.day >= effective_repayment_day(year, month, repayment_day):
            count += 1

    return count


__all__ = [
    "add_months",
    "count_repayments_due",
    "days_in_month",
    "effective_repayment_day",
    "months_between",
    "to_date",
]
