from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date

ONCE = "once"
DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
QUARTERLY = "quarterly"
YEARLY = "yearly"
CUSTOM = "custom"

SUPPORTED_KINDS = {ONCE, DAILY, WEEKLY, MONTHLY, QUARTERLY, YEARLY, CUSTOM}

YEARLY_ANNIVERSARY = "anniversary"
YEARLY_SMOOTHED = "smoothed"
SUPPORTED_YEARLY_MODES = {YEARLY_ANNIVERSARY, YEARLY_SMOOTHED}


class ValidationError(ValueError):
    """Raised when a caller hands the engine malformed input."""


@dataclass(frozen=True)
class Recurrence:
    kind: str
    interval: int | None = None

    def __post_init__(self) -> None:
        kind = normalize_kind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind == CUSTOM:
            if self.interval is None:
                raise ValidationError("Custom recurrence requires an interval.")
            if isinstance(self.interval, bool) or not isinstance(self.interval, int):
                raise ValidationError("Custom recurrence interval must be an integer.")
            if self.interval <= 0:
                raise ValidationError("Custom recurrence interval must be at least 1.")
        elif self.interval is not None:
            raise ValidationError(f"Recurrence kind '{kind}' does not take an interval.")

    @property
    def period_months(self) -> int | None:
        if self.kind == QUARTERLY:
            return 3
        if self.kind == CUSTOM:
            return self.interval
        return None


def normalize_kind(kind: str) -> str:
    normalized = kind.strip().lower() if isinstance(kind, str) else ""
    if normalized not in SUPPORTED_KINDS:
        raise ValidationError(f"Unsupported recurrence kind: {kind}")
    return normalized


def normalize_yearly_mode(mode: str) -> str:
    normalized = mode.strip().lower() if isinstance(mode, str) else ""
    if normalized not in SUPPORTED_YEARLY_MODES:
        raise ValidationError(f"Unsupported yearly mode: {mode}")
    return normalized


def validate_month(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12.")
    if not 1 <= year <= 9999:
        raise ValidationError("year must be between 1 and 9999.")


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of the month."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def months_between(start_date: date, target_month: int, target_year: int) -> int:
    """Whole calendar months from start_date's month to the target month.

    Negative when the target month lies before the start month.
    """
    return (target_year - start_date.year) * 12 + (target_month - start_date.month)


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    month_index = (year * 12 + month - 1) + months
    return month_index // 12, month_index % 12 + 1


def iter_months(start_date: date, end_date: date) -> list[tuple[int, int]]:
    """(year, month) pairs for every calendar month touched by the range."""
    months: list[tuple[int, int]] = []
    cursor = (start_date.year, start_date.month)
    last = (end_date.year, end_date.month)
    while cursor <= last:
        months.append(cursor)
        cursor = shift_month(cursor[0], cursor[1], 1)
    return months
