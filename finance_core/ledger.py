"""Immutable ledger records consumed by the projection engine.

Records are snapshots handed over by the data-access layer; nothing in the
engine mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from finance_core.money import ZERO, coerce_amount
from finance_core.recurrence import ONCE, Recurrence, ValidationError

CUMULATIVE = "cumulative"
SNAPSHOT = "snapshot"

ACCOUNT_CLASSIFICATIONS = {
    "checking": SNAPSHOT,
    "current": SNAPSHOT,
    "savings": CUMULATIVE,
    "etf": CUMULATIVE,
    "investment": CUMULATIVE,
}

UNCATEGORIZED = "uncategorized"


def _validate_amount(amount: Decimal | int | float | str) -> Decimal:
    try:
        coerced = coerce_amount(amount)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if not coerced.is_finite() or coerced <= ZERO:
        raise ValidationError("amount must be greater than zero.")
    return coerced


def _is_calendar_date(value: object) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def _validate_dates(start_date: date, end_date: date | None) -> None:
    if not _is_calendar_date(start_date):
        raise ValidationError("start_date must be a calendar date.")
    if end_date is not None:
        if not _is_calendar_date(end_date):
            raise ValidationError("end_date must be a calendar date.")
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date.")


@dataclass(frozen=True)
class MoneyEvent:
    """A recurring or one-off income or expense."""

    amount: Decimal
    recurrence: Recurrence
    start_date: date
    end_date: date | None = None
    account_id: str | int | None = None
    category_id: str | int | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _validate_amount(self.amount))
        if not isinstance(self.recurrence, Recurrence):
            raise ValidationError("recurrence must be a Recurrence.")
        _validate_dates(self.start_date, self.end_date)

    @property
    def is_one_off(self) -> bool:
        return self.recurrence.kind == ONCE


@dataclass(frozen=True)
class Transfer:
    amount: Decimal
    recurrence: Recurrence
    start_date: date
    source_account_id: str | int
    target_account_id: str | int
    end_date: date | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _validate_amount(self.amount))
        if not isinstance(self.recurrence, Recurrence):
            raise ValidationError("recurrence must be a Recurrence.")
        _validate_dates(self.start_date, self.end_date)
        if self.source_account_id == self.target_account_id:
            raise ValidationError("Transfer source and target accounts must differ.")


@dataclass(frozen=True)
class SpendingEntry:
    """An actual, dated spend recorded outside any recurring schedule."""

    amount: Decimal
    date: date
    account_id: str | int | None = None
    category_id: str | int | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _validate_amount(self.amount))
        if not _is_calendar_date(self.date):
            raise ValidationError("date must be a calendar date.")


@dataclass(frozen=True)
class Account:
    id: str | int
    current_balance: Decimal
    type: str = "checking"
    name: str | None = None
    currency: str = "EUR"

    def __post_init__(self) -> None:
        try:
            balance = coerce_amount(self.current_balance)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if not balance.is_finite():
            raise ValidationError("current_balance must be a finite amount.")
        object.__setattr__(self, "current_balance", balance)
        normalized_type = self.type.strip().lower() if isinstance(self.type, str) else ""
        if normalized_type not in ACCOUNT_CLASSIFICATIONS:
            raise ValidationError(f"Unsupported account type: {self.type}")
        object.__setattr__(self, "type", normalized_type)

    @property
    def classification(self) -> str:
        return ACCOUNT_CLASSIFICATIONS[self.type]

    @property
    def is_cumulative(self) -> bool:
        return self.classification == CUMULATIVE


@dataclass(frozen=True)
class Category:
    id: str | int
    name: str
    icon: str | None = None
    color: str | None = None


UNCATEGORIZED_CATEGORY = Category(id=UNCATEGORIZED, name="Uncategorized")
