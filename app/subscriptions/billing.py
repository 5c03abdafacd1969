"""
Billing period arithmetic.

Period ends are computed by calendar-month addition with an
end-of-month clamp: the target month keeps the start's day-of-month
when it exists, otherwise the last day of the target month is used.
Time of day and tzinfo are carried over unchanged.

    2024-01-31 + monthly   -> 2024-02-29
    2023-01-31 + monthly   -> 2023-02-28
    2024-03-31 + monthly   -> 2024-04-30
    2023-11-30 + quarterly -> 2024-02-29
    2024-02-29 + annually  -> 2025-02-28

Clamping is applied once per computation from the original start, so a
monthly period started on the 31st always ends on the 31st or the last
day of a shorter month.
"""

from __future__ import annotations

import calendar
from datetime import datetime

from subscriptions.state_machines import BillingInterval

INTERVAL_MONTHS: dict[str, int] = {
    BillingInterval.MONTHLY: 1,
    BillingInterval.QUARTERLY: 3,
    BillingInterval.ANNUALLY: 12,
}


def add_months(start: datetime, months: int) -> datetime:
    """Return ``start`` shifted by ``months`` calendar months, clamping the day."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def compute_period_end(start: datetime, interval: str) -> datetime:
    """
    Compute the exclusive end of a billing period beginning at ``start``.

    Args:
        start: Period start instant
        interval: A BillingInterval value

    Returns:
        The period end instant (strictly after ``start``)

    Raises:
        ValueError: If ``interval`` is not a known billing interval
    """
    try:
        months = INTERVAL_MONTHS[interval]
    except KeyError:
        raise ValueError(f"Unknown billing interval: {interval!r}") from None
    return add_months(start, months)
