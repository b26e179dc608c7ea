from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from finance_core.money import ZERO
from finance_core.recurrence import (
    CUSTOM,
    DAILY,
    MONTHLY,
    ONCE,
    QUARTERLY,
    WEEKLY,
    YEARLY,
    YEARLY_ANNIVERSARY,
    Recurrence,
    ValidationError,
    days_in_month,
    iter_months,
    month_bounds,
    months_between,
    normalize_yearly_mode,
    validate_month,
)

DAYS_PER_WEEK = Decimal("7")
MONTHS_PER_YEAR = Decimal("12")


class Schedulable(Protocol):
    amount: Decimal
    recurrence: Recurrence
    start_date: date
    end_date: date | None


def is_active_in_month(event: Schedulable, month: int, year: int) -> bool:
    """True unless the event starts after, or ends before, the target month."""
    first_day, last_day = month_bounds(year, month)
    if event.start_date > last_day:
        return False
    if event.end_date is not None and event.end_date < first_day:
        return False
    return True


def occurs_in_month(
    event: Schedulable,
    month: int,
    year: int,
    yearly_mode: str = YEARLY_ANNIVERSARY,
) -> Decimal:
    """Cash effect of ``event`` in the calendar month ``month``/``year``.

    Comparisons are made at month granularity: a monthly item that starts
    on the 31st still lands in a 30-day month. Quarterly and custom items
    repeat every N whole months counted from the start month, not from
    calendar quarter boundaries.
    """
    validate_month(month, year)
    mode = normalize_yearly_mode(yearly_mode)
    if not is_active_in_month(event, month, year):
        return ZERO

    amount = event.amount
    recurrence = event.recurrence
    kind = recurrence.kind
    start = event.start_date

    if kind == ONCE:
        if start.month == month and start.year == year:
            return amount
        return ZERO
    if kind == DAILY:
        return amount * days_in_month(year, month)
    if kind == WEEKLY:
        return amount * Decimal(days_in_month(year, month)) / DAYS_PER_WEEK
    if kind == MONTHLY:
        return amount
    if kind in {QUARTERLY, CUSTOM}:
        elapsed = months_between(start, month, year)
        if elapsed >= 0 and elapsed % recurrence.period_months == 0:
            return amount
        return ZERO
    if kind == YEARLY:
        if mode == YEARLY_ANNIVERSARY:
            if month == start.month and year >= start.year:
                return amount
            return ZERO
        return amount / MONTHS_PER_YEAR
    raise ValueError(f"Unsupported recurrence kind: {kind}")


def occurrences_between(
    event: Schedulable,
    start_date: date,
    end_date: date,
    yearly_mode: str = YEARLY_ANNIVERSARY,
) -> Decimal:
    """Sum of monthly contributions for every month the range touches."""
    if start_date > end_date:
        raise ValidationError("start_date must be on or before end_date.")
    total = ZERO
    for year, month in iter_months(start_date, end_date):
        total += occurs_in_month(event, month, year, yearly_mode)
    return total
