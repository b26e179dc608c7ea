"""Validation of raw records handed over by the data-access layer.

Rows arrive as mappings shaped like the database columns: amounts as exact
base-10 strings, dates as ISO strings, recurrence split into
``recurrence_type`` and ``recurrence_interval``. The payloads below parse
them with pydantic and build the immutable engine records.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Type, TypeVar

import pydantic
from pydantic import BaseModel

from finance_core.ledger import Account, Category, MoneyEvent, SpendingEntry, Transfer
from finance_core.recurrence import CUSTOM, Recurrence, ValidationError, normalize_kind

PayloadT = TypeVar("PayloadT", bound="RecordPayload")


class RecordPayload(BaseModel):
    def to_record(self) -> Any:
        raise NotImplementedError


class RecurrencePayload(RecordPayload):
    recurrence_type: str
    recurrence_interval: int | None = None

    def to_recurrence(self) -> Recurrence:
        kind = normalize_kind(self.recurrence_type)
        interval = self.recurrence_interval if kind == CUSTOM else None
        return Recurrence(kind=kind, interval=interval)

    def to_record(self) -> Recurrence:
        return self.to_recurrence()


class ExpensePayload(RecurrencePayload):
    id: str | int | None = None
    name: str | None = None
    amount: Decimal
    start_date: date
    end_date: date | None = None
    account_id: str | int | None = None
    category_id: str | int | None = None

    def to_record(self) -> MoneyEvent:
        return MoneyEvent(
            amount=self.amount,
            recurrence=self.to_recurrence(),
            start_date=self.start_date,
            end_date=self.end_date,
            account_id=self.account_id,
            category_id=self.category_id,
            name=self.name.strip() if self.name else None,
        )


class IncomePayload(RecurrencePayload):
    id: str | int | None = None
    source: str | None = None
    amount: Decimal
    start_date: date
    end_date: date | None = None
    account_id: str | int | None = None

    def to_record(self) -> MoneyEvent:
        return MoneyEvent(
            amount=self.amount,
            recurrence=self.to_recurrence(),
            start_date=self.start_date,
            end_date=self.end_date,
            account_id=self.account_id,
            name=self.source.strip() if self.source else None,
        )


class TransferPayload(RecurrencePayload):
    id: str | int | None = None
    source_account_id: str | int
    target_account_id: str | int
    amount: Decimal
    start_date: date
    end_date: date | None = None
    description: str | None = None

    def to_record(self) -> Transfer:
        return Transfer(
            amount=self.amount,
            recurrence=self.to_recurrence(),
            start_date=self.start_date,
            end_date=self.end_date,
            source_account_id=self.source_account_id,
            target_account_id=self.target_account_id,
            description=self.description.strip() if self.description else None,
        )


class SpendingPayload(RecordPayload):
    id: str | int | None = None
    amount: Decimal
    date: date
    account_id: str | int | None = None
    category_id: str | int | None = None
    description: str | None = None

    def to_record(self) -> SpendingEntry:
        return SpendingEntry(
            amount=self.amount,
            date=self.date,
            account_id=self.account_id,
            category_id=self.category_id,
            description=self.description.strip() if self.description else None,
        )


class AccountPayload(RecordPayload):
    id: str | int
    name: str | None = None
    type: str
    balance: Decimal = Decimal("0")
    currency: str = "EUR"

    def to_record(self) -> Account:
        return Account(
            id=self.id,
            current_balance=self.balance,
            type=self.type,
            name=self.name.strip() if self.name else None,
            currency=self.currency.strip().upper(),
        )


class CategoryPayload(RecordPayload):
    id: str | int
    name: str
    icon: str | None = None
    color: str | None = None

    def to_record(self) -> Category:
        name = self.name.strip()
        if not name:
            raise ValidationError("Category name required.")
        return Category(id=self.id, name=name, icon=self.icon, color=self.color)


def parse_record(model: Type[PayloadT], data: Mapping[str, Any]) -> Any:
    """Validate one raw row and build its engine record."""
    try:
        payload = model.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(_describe(exc)) from exc
    try:
        return payload.to_record()
    except ValidationError:
        raise
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def parse_records(model: Type[PayloadT], rows: Iterable[Mapping[str, Any]]) -> list[Any]:
    return [parse_record(model, row) for row in rows]


def _describe(exc: pydantic.ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(messages) or "Invalid record."
