from __future__ import annotations

from decimal import Decimal

from finance_core.money import ZERO, coerce_amount
from finance_core.recurrence import (
    CUSTOM,
    DAILY,
    MONTHLY,
    ONCE,
    QUARTERLY,
    WEEKLY,
    YEARLY,
    Recurrence,
)

DAYS_PER_MONTH = Decimal("30")
WEEKS_PER_MONTH = Decimal("4.33")
MONTHS_PER_QUARTER = Decimal("3")
MONTHS_PER_YEAR = Decimal("12")


def normalize_to_monthly(amount: Decimal, recurrence: Recurrence) -> Decimal:
    """Approximate monthly burden of an amount repeating with ``recurrence``.

    This is a steady-state rate for budgeting displays. It deliberately
    differs from ``occurs_in_month``: a daily item is always 30 days' worth
    here, whatever the length of any particular month, and a one-off item
    has no monthly equivalent at all.
    """
    value = coerce_amount(amount)
    kind = recurrence.kind
    if kind == ONCE:
        return ZERO
    if kind == DAILY:
        return value * DAYS_PER_MONTH
    if kind == WEEKLY:
        return value * WEEKS_PER_MONTH
    if kind == MONTHLY:
        return value
    if kind == QUARTERLY:
        return value / MONTHS_PER_QUARTER
    if kind == YEARLY:
        return value / MONTHS_PER_YEAR
    if kind == CUSTOM:
        return value / Decimal(recurrence.interval)
    raise ValueError(f"Unsupported recurrence kind: {kind}")
