from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Sequence

from finance_core.ledger import Account, MoneyEvent, Transfer
from finance_core.money import ZERO, round_currency
from finance_core.occurrence import occurs_in_month
from finance_core.recurrence import YEARLY_ANNIVERSARY, ValidationError, shift_month


@dataclass(frozen=True)
class AccountEvents:
    incomes: Sequence[MoneyEvent] = ()
    expenses: Sequence[MoneyEvent] = ()
    transfers_in: Sequence[Transfer] = ()
    transfers_out: Sequence[Transfer] = ()


@dataclass(frozen=True)
class MonthProjection:
    month: int
    year: int
    income: Decimal
    expenses: Decimal
    transfers_in: Decimal
    transfers_out: Decimal
    net: Decimal
    cumulative_balance: Decimal


@dataclass(frozen=True)
class AccountForecast:
    account: Account
    current_balance: Decimal
    is_cumulative: bool
    months: List[MonthProjection]


def split_transfers(
    account_id: str | int, transfers: Iterable[Transfer]
) -> tuple[List[Transfer], List[Transfer]]:
    """Route transfers touching ``account_id`` into (incoming, outgoing)."""
    incoming: List[Transfer] = []
    outgoing: List[Transfer] = []
    for transfer in transfers:
        if transfer.target_account_id == account_id:
            incoming.append(transfer)
        elif transfer.source_account_id == account_id:
            outgoing.append(transfer)
    return incoming, outgoing


def project_account(
    account: Account,
    events: AccountEvents,
    months_ahead: int,
    today: date | None = None,
    income_yearly_mode: str = YEARLY_ANNIVERSARY,
) -> AccountForecast:
    """Walk ``months_ahead`` months starting with the month after ``today``.

    Cumulative accounts (savings, investment) carry the running balance
    forward from ``account.current_balance``. Snapshot accounts (checking)
    report each month's net flow on its own, so ``cumulative_balance`` equals
    ``net`` for them.
    """
    if isinstance(months_ahead, bool) or not isinstance(months_ahead, int):
        raise ValidationError("months_ahead must be an integer.")
    if months_ahead < 1:
        raise ValidationError("months_ahead must be at least 1.")
    reference = today or date.today()

    is_cumulative = account.is_cumulative
    running_balance = account.current_balance if is_cumulative else ZERO
    projections: List[MonthProjection] = []
    for offset in range(1, months_ahead + 1):
        year, month = shift_month(reference.year, reference.month, offset)

        income = _sum_month(events.incomes, month, year, income_yearly_mode)
        expenses = _sum_month(events.expenses, month, year)
        transfers_in = _sum_month(events.transfers_in, month, year)
        transfers_out = _sum_month(events.transfers_out, month, year)
        net = income - expenses + transfers_in - transfers_out

        if is_cumulative:
            running_balance += net
        else:
            running_balance = net

        projections.append(
            MonthProjection(
                month=month,
                year=year,
                income=round_currency(income),
                expenses=round_currency(expenses),
                transfers_in=round_currency(transfers_in),
                transfers_out=round_currency(transfers_out),
                net=round_currency(net),
                cumulative_balance=round_currency(running_balance),
            )
        )

    return AccountForecast(
        account=account,
        current_balance=account.current_balance,
        is_cumulative=is_cumulative,
        months=projections,
    )


def project_accounts(
    accounts: Iterable[Account],
    incomes: Iterable[MoneyEvent],
    expenses: Iterable[MoneyEvent],
    transfers: Iterable[Transfer],
    months_ahead: int,
    today: date | None = None,
    income_yearly_mode: str = YEARLY_ANNIVERSARY,
) -> List[AccountForecast]:
    income_items = list(incomes)
    expense_items = list(expenses)
    transfer_items = list(transfers)
    reference = today or date.today()

    forecasts: List[AccountForecast] = []
    for account in accounts:
        transfers_in, transfers_out = split_transfers(account.id, transfer_items)
        events = AccountEvents(
            incomes=[item for item in income_items if item.account_id == account.id],
            expenses=[item for item in expense_items if item.account_id == account.id],
            transfers_in=transfers_in,
            transfers_out=transfers_out,
        )
        forecasts.append(
            project_account(
                account,
                events,
                months_ahead,
                today=reference,
                income_yearly_mode=income_yearly_mode,
            )
        )
    return forecasts


def _sum_month(
    events: Iterable[MoneyEvent | Transfer],
    month: int,
    year: int,
    yearly_mode: str = YEARLY_ANNIVERSARY,
) -> Decimal:
    total = ZERO
    for event in events:
        total += occurs_in_month(event, month, year, yearly_mode)
    return total
