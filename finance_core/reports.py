"""Read-only aggregations over incomes, expenses and actual spending.

Every report is built from the same two primitives, ``occurs_in_month`` and
``normalize_to_monthly``. Totals are accumulated unrounded and rounded
half-up to cents only in the returned records.

Incomes follow ``settings.income_yearly_mode`` (yearly income smoothed over
every month by default); expenses always post in their anniversary month.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence

from finance_core.currency_conversion import StaticRateProvider, convert_amount
from finance_core.ledger import (
    UNCATEGORIZED,
    UNCATEGORIZED_CATEGORY,
    Account,
    Category,
    MoneyEvent,
    SpendingEntry,
)
from finance_core.money import ZERO, percentage, round_currency, sum_amounts
from finance_core.normalizer import normalize_to_monthly
from finance_core.occurrence import occurrences_between, occurs_in_month
from finance_core.recurrence import (
    YEARLY_ANNIVERSARY,
    ValidationError,
    month_bounds,
    shift_month,
    validate_month,
)
from finance_core.settings import ProjectionSettings


@dataclass(frozen=True)
class OverviewLine:
    item: MoneyEvent
    amount: Decimal


@dataclass(frozen=True)
class MonthlyOverview:
    month: int
    year: int
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    spending_total: Decimal = ZERO
    expenses: List[OverviewLine] = field(default_factory=list)
    incomes: List[OverviewLine] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryBreakdownEntry:
    category: Category
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class TrendEntry:
    label: str
    year: int
    month: int
    income: Decimal
    expenses: Decimal
    savings: Decimal


@dataclass(frozen=True)
class ForecastMonth:
    month: int
    year: int
    income: Decimal
    expenses: Decimal
    balance: Decimal


@dataclass(frozen=True)
class Forecast:
    months: int
    projected_income: Decimal
    projected_expenses: Decimal
    projected_balance: Decimal
    monthly_details: List[ForecastMonth]


@dataclass(frozen=True)
class SavingsProgress:
    total_income: Decimal
    total_expenses: Decimal
    savings_amount: Decimal
    savings_rate: Decimal


@dataclass(frozen=True)
class NormalizedExpense:
    expense: MoneyEvent
    monthly_amount: Decimal


@dataclass(frozen=True)
class NormalizedExpenses:
    items: List[NormalizedExpense]
    total: Decimal


@dataclass(frozen=True)
class DashboardStats:
    home_currency: str
    total_assets: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    savings: Decimal
    income_trend: Decimal
    expense_trend: Decimal


@dataclass(frozen=True)
class _MonthTotals:
    income: Decimal
    expenses: Decimal
    spending: Decimal
    income_lines: List[OverviewLine]
    expense_lines: List[OverviewLine]


def monthly_overview(
    month: int,
    year: int,
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    settings: ProjectionSettings | None = None,
) -> MonthlyOverview:
    validate_month(month, year)
    settings = settings or ProjectionSettings()
    totals = _month_totals(month, year, list(expenses), list(incomes), list(spending), settings)
    total_income = round_currency(totals.income)
    total_expenses = round_currency(totals.expenses)
    return MonthlyOverview(
        month=month,
        year=year,
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        spending_total=round_currency(totals.spending),
        expenses=totals.expense_lines,
        incomes=totals.income_lines,
    )


def category_breakdown(
    start_date: date,
    end_date: date,
    expenses: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    categories: Optional[Mapping[str | int, Category]] = None,
) -> List[CategoryBreakdownEntry]:
    """Expense totals per category over an inclusive date range.

    Recurring expenses count once for every month the range touches in
    which they occur. Items without a known category fall into the
    ``uncategorized`` bucket.
    """
    if start_date > end_date:
        raise ValidationError("start_date must be on or before end_date.")

    buckets: dict[str | int, Decimal] = {}
    for expense in expenses:
        amount = occurrences_between(expense, start_date, end_date)
        if amount > ZERO:
            key = _bucket_key(expense.category_id, categories)
            buckets[key] = buckets.get(key, ZERO) + amount
    for entry in spending:
        if start_date <= entry.date <= end_date:
            key = _bucket_key(entry.category_id, categories)
            buckets[key] = buckets.get(key, ZERO) + entry.amount

    total = sum_amounts(buckets.values())
    breakdown = [
        CategoryBreakdownEntry(
            category=_resolve_category(key, categories),
            amount=round_currency(amount),
            percentage=percentage(amount, total),
        )
        for key, amount in buckets.items()
    ]
    breakdown.sort(key=lambda entry: entry.amount, reverse=True)
    return breakdown


def monthly_trend(
    months: int | None,
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> List[TrendEntry]:
    """Income, expenses and savings for the last ``months`` months, oldest first.

    The current month is the last entry.
    """
    settings = settings or ProjectionSettings()
    months = settings.forecast_months if months is None else months
    _validate_count(months, "months")
    reference = today or date.today()
    slots = [
        shift_month(reference.year, reference.month, offset)
        for offset in range(-(months - 1), 1)
    ]
    return _trend_entries(slots, expenses, incomes, spending, settings)


def year_overview(
    year: int,
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    settings: ProjectionSettings | None = None,
) -> List[TrendEntry]:
    validate_month(1, year)
    slots = [(year, month) for month in range(1, 13)]
    return _trend_entries(slots, expenses, incomes, spending, settings)


def forecast(
    months: int | None,
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> Forecast:
    """Projected totals for ``months`` months starting with the current one."""
    settings = settings or ProjectionSettings()
    months = settings.forecast_months if months is None else months
    _validate_count(months, "months")
    reference = today or date.today()
    expense_items = list(expenses)
    income_items = list(incomes)
    spending_items = list(spending)

    details: List[ForecastMonth] = []
    projected_income = ZERO
    projected_expenses = ZERO
    for offset in range(months):
        year, month = shift_month(reference.year, reference.month, offset)
        totals = _month_totals(month, year, expense_items, income_items, spending_items, settings)
        projected_income += totals.income
        projected_expenses += totals.expenses
        income = round_currency(totals.income)
        month_expenses = round_currency(totals.expenses)
        details.append(
            ForecastMonth(
                month=month,
                year=year,
                income=income,
                expenses=month_expenses,
                balance=income - month_expenses,
            )
        )

    return Forecast(
        months=months,
        projected_income=round_currency(projected_income),
        projected_expenses=round_currency(projected_expenses),
        projected_balance=round_currency(projected_income - projected_expenses),
        monthly_details=details,
    )


def savings_progress(
    month: int,
    year: int,
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    settings: ProjectionSettings | None = None,
) -> SavingsProgress:
    overview = monthly_overview(month, year, expenses, incomes, spending, settings)
    savings_amount = overview.total_income - overview.total_expenses
    return SavingsProgress(
        total_income=overview.total_income,
        total_expenses=overview.total_expenses,
        savings_amount=savings_amount,
        savings_rate=percentage(savings_amount, overview.total_income),
    )


def normalized_expenses(expenses: Iterable[MoneyEvent]) -> NormalizedExpenses:
    items = [
        NormalizedExpense(
            expense=expense,
            monthly_amount=normalize_to_monthly(expense.amount, expense.recurrence),
        )
        for expense in expenses
    ]
    total = sum_amounts(item.monthly_amount for item in items)
    return NormalizedExpenses(
        items=[
            NormalizedExpense(expense=item.expense, monthly_amount=round_currency(item.monthly_amount))
            for item in items
        ],
        total=round_currency(total),
    )


def dashboard_stats(
    accounts: Iterable[Account],
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry] = (),
    today: date | None = None,
    settings: ProjectionSettings | None = None,
    rate_provider: StaticRateProvider | None = None,
) -> DashboardStats:
    """Headline figures for the current month.

    Trends are the percentage change against the previous month and are 0
    when the previous month's figure is 0.
    """
    settings = settings or ProjectionSettings()
    reference = today or date.today()
    expense_items = list(expenses)
    income_items = list(incomes)
    spending_items = list(spending)

    total_assets = ZERO
    for account in accounts:
        total_assets += convert_amount(
            account.current_balance,
            account.currency,
            settings.home_currency,
            rate_provider=rate_provider,
        )

    current = monthly_overview(
        reference.month, reference.year, expense_items, income_items, spending_items, settings
    )
    previous_year, previous_month = shift_month(reference.year, reference.month, -1)
    previous = monthly_overview(
        previous_month, previous_year, expense_items, income_items, spending_items, settings
    )

    return DashboardStats(
        home_currency=settings.home_currency,
        total_assets=round_currency(total_assets),
        monthly_income=current.total_income,
        monthly_expenses=current.total_expenses,
        savings=current.balance,
        income_trend=percentage(current.total_income - previous.total_income, previous.total_income),
        expense_trend=percentage(
            current.total_expenses - previous.total_expenses, previous.total_expenses
        ),
    )


def _month_totals(
    month: int,
    year: int,
    expenses: Sequence[MoneyEvent],
    incomes: Sequence[MoneyEvent],
    spending: Sequence[SpendingEntry],
    settings: ProjectionSettings,
) -> _MonthTotals:
    expense_lines = _contributions(expenses, month, year, YEARLY_ANNIVERSARY)
    income_lines = _contributions(incomes, month, year, settings.income_yearly_mode)

    first_day, last_day = month_bounds(year, month)
    spending_total = ZERO
    for entry in spending:
        if first_day <= entry.date <= last_day:
            spending_total += entry.amount

    recurring_expenses = sum_amounts(line.amount for line in expense_lines)
    return _MonthTotals(
        income=sum_amounts(line.amount for line in income_lines),
        expenses=recurring_expenses + spending_total,
        spending=spending_total,
        income_lines=income_lines,
        expense_lines=expense_lines,
    )


def _contributions(
    events: Iterable[MoneyEvent], month: int, year: int, yearly_mode: str
) -> List[OverviewLine]:
    lines: List[OverviewLine] = []
    for event in events:
        amount = occurs_in_month(event, month, year, yearly_mode)
        if amount > ZERO:
            lines.append(OverviewLine(item=event, amount=amount))
    return lines


def _trend_entries(
    slots: Sequence[tuple[int, int]],
    expenses: Iterable[MoneyEvent],
    incomes: Iterable[MoneyEvent],
    spending: Iterable[SpendingEntry],
    settings: ProjectionSettings | None,
) -> List[TrendEntry]:
    settings = settings or ProjectionSettings()
    expense_items = list(expenses)
    income_items = list(incomes)
    spending_items = list(spending)

    entries: List[TrendEntry] = []
    for year, month in slots:
        totals = _month_totals(month, year, expense_items, income_items, spending_items, settings)
        income = round_currency(totals.income)
        month_expenses = round_currency(totals.expenses)
        entries.append(
            TrendEntry(
                label=f"{year:04d}-{month:02d}",
                year=year,
                month=month,
                income=income,
                expenses=month_expenses,
                savings=income - month_expenses,
            )
        )
    return entries


def _bucket_key(
    category_id: str | int | None,
    categories: Optional[Mapping[str | int, Category]],
) -> str | int:
    if category_id is None:
        return UNCATEGORIZED
    if categories is not None and category_id not in categories:
        return UNCATEGORIZED
    return category_id


def _resolve_category(
    key: str | int, categories: Optional[Mapping[str | int, Category]]
) -> Category:
    if key == UNCATEGORIZED:
        return UNCATEGORIZED_CATEGORY
    if categories is None:
        return Category(id=key, name=str(key))
    return categories[key]


def _validate_count(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer.")
    if value < 1:
        raise ValidationError(f"{name} must be at least 1.")
