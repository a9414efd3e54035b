"""Progress through a fixed-term loan."""

from __future__ import annotations

from datetime import date

from ..models.debt import DateLike, LoanProgress
from .calendar_math import months_between


def calculate_loan_progress(
    start_date: DateLike, end_date: DateLike, now: DateLike | None = None
) -> LoanProgress:
    """Return elapsed/remaining months and percent complete for a loan term.

    A zero-length term reports 0% rather than dividing by zero, and progress
    is capped at 100% once the end date has passed.
    """

    today = now if now is not None else date.today()

    total_months = months_between(start_date, end_date)
    months_elapsed = max(0, months_between(start_date, today))
    months_remaining = max(0, total_months - months_elapsed)
    if total_months > 0:
        progress_percent = min(100.0, months_elapsed / total_months * 100)
    else:
        progress_percent = 0.0

    return LoanProgress(
        total_months=total_months,
        months_elapsed=months_elapsed,
        months_remaining=months_remaining,
        progress_percent=progress_percent,
        is_term_complete=months_elapsed >= total_months,
    )


__all__ = ["calculate_loan_progress"]
