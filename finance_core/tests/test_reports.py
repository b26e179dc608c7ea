import unittest
from datetime import date
from decimal import Decimal

from finance_core.currency_conversion import StaticRateProvider
from finance_core.ledger import UNCATEGORIZED, Account, Category, MoneyEvent, SpendingEntry
from finance_core.recurrence import YEARLY_ANNIVERSARY, Recurrence, ValidationError
from finance_core.reports import (
    category_breakdown,
    dashboard_stats,
    forecast,
    monthly_overview,
    monthly_trend,
    normalized_expenses,
    savings_progress,
    year_overview,
)
from finance_core.settings import ProjectionSettings


def make_event(kind, amount, start, category_id=None, interval=None, end=None):
    return MoneyEvent(
        amount=Decimal(amount),
        recurrence=Recurrence(kind, interval=interval),
        start_date=start,
        end_date=end,
        category_id=category_id,
    )


class MonthlyOverviewTests(unittest.TestCase):
    def test_monthly_expense_total(self) -> None:
        rent = make_event("monthly", "1200.00", date(2024, 1, 1))

        overview = monthly_overview(6, 2024, [rent], [])

        self.assertEqual(overview.total_expenses, Decimal("1200.00"))
        self.assertEqual(overview.balance, Decimal("-1200.00"))
        self.assertEqual(len(overview.expenses), 1)

    def test_daily_expense_adds_days_of_month(self) -> None:
        rent = make_event("monthly", "1200.00", date(2024, 1, 1))
        lunch = make_event("daily", "10.00", date(2024, 6, 1))

        june = monthly_overview(6, 2024, [rent, lunch], [])
        may = monthly_overview(5, 2024, [rent, lunch], [])

        self.assertEqual(june.total_expenses, Decimal("1500.00"))
        self.assertEqual(may.total_expenses, Decimal("1200.00"))

    def test_income_rules(self) -> None:
        incomes = [
            make_event("monthly", "3000", date(2024, 1, 1)),
            make_event("yearly", "1200", date(2023, 11, 20)),
            make_event("once", "500", date(2024, 6, 30)),
            make_event("once", "700", date(2024, 7, 1)),
        ]

        overview = monthly_overview(6, 2024, [], incomes)

        self.assertEqual(overview.total_income, Decimal("3600.00"))
        self.assertEqual(len(overview.incomes), 3)

    def test_anniversary_setting_for_yearly_income(self) -> None:
        bonus = make_event("yearly", "12000", date(2024, 3, 15))
        settings = ProjectionSettings(income_yearly_mode=YEARLY_ANNIVERSARY)

        march = monthly_overview(3, 2024, [], [bonus], settings=settings)
        april = monthly_overview(4, 2024, [], [bonus], settings=settings)

        self.assertEqual(march.total_income, Decimal("12000.00"))
        self.assertEqual(april.total_income, Decimal("0.00"))

    def test_yearly_expense_keeps_anniversary_rule(self) -> None:
        insurance = make_event("yearly", "600", date(2024, 3, 1))

        self.assertEqual(
            monthly_overview(4, 2024, [insurance], []).total_expenses, Decimal("0.00")
        )
        self.assertEqual(
            monthly_overview(3, 2025, [insurance], []).total_expenses, Decimal("600.00")
        )

    def test_spending_entries_count_in_their_month(self) -> None:
        spending = [
            SpendingEntry(amount=Decimal("12.50"), date=date(2024, 6, 3)),
            SpendingEntry(amount=Decimal("7.50"), date=date(2024, 6, 30)),
            SpendingEntry(amount=Decimal("99"), date=date(2024, 7, 1)),
        ]

        overview = monthly_overview(6, 2024, [], [], spending)

        self.assertEqual(overview.spending_total, Decimal("20.00"))
        self.assertEqual(overview.total_expenses, Decimal("20.00"))

    def test_empty_month_is_zero(self) -> None:
        overview = monthly_overview(2, 2024, [], [])

        self.assertEqual(overview.total_income, Decimal("0"))
        self.assertEqual(overview.total_expenses, Decimal("0"))
        self.assertEqual(overview.balance, Decimal("0"))


class CategoryBreakdownTests(unittest.TestCase):
    def setUp(self) -> None:
        self.categories = {
            "housing": Category(id="housing", name="Housing", icon="house", color="#336699"),
            "health": Category(id="health", name="Health"),
        }
        self.expenses = [
            make_event("monthly", "900", date(2024, 1, 1), category_id="housing"),
            make_event("monthly", "50", date(2024, 1, 1), category_id="health"),
        ]

    def test_partitions_and_sorts_by_amount(self) -> None:
        spending = [SpendingEntry(amount=Decimal("50"), date=date(2024, 3, 10))]

        breakdown = category_breakdown(
            date(2024, 3, 1),
            date(2024, 3, 31),
            self.expenses,
            spending,
            categories=self.categories,
        )

        self.assertEqual(
            [(entry.category.id, entry.amount, entry.percentage) for entry in breakdown],
            [
                ("housing", Decimal("900.00"), Decimal("90.00")),
                ("health", Decimal("50.00"), Decimal("5.00")),
                (UNCATEGORIZED, Decimal("50.00"), Decimal("5.00")),
            ],
        )
        self.assertEqual(breakdown[0].category.name, "Housing")

    def test_unknown_category_is_uncategorized(self) -> None:
        expenses = [make_event("monthly", "20", date(2024, 1, 1), category_id="gone")]

        breakdown = category_breakdown(
            date(2024, 3, 1), date(2024, 3, 31), expenses, categories=self.categories
        )

        self.assertEqual(breakdown[0].category.id, UNCATEGORIZED)

    def test_range_covers_several_months(self) -> None:
        breakdown = category_breakdown(
            date(2024, 1, 1), date(2024, 3, 31), self.expenses, categories=self.categories
        )

        self.assertEqual(breakdown[0].amount, Decimal("2700.00"))
        self.assertEqual(breakdown[1].amount, Decimal("150.00"))

    def test_percentages_sum_to_one_hundred(self) -> None:
        expenses = [
            make_event("monthly", "1", date(2024, 1, 1), category_id=name)
            for name in ("a", "b", "c")
        ]

        breakdown = category_breakdown(date(2024, 5, 1), date(2024, 5, 31), expenses)

        total = sum(entry.percentage for entry in breakdown)
        self.assertLessEqual(abs(total - Decimal("100")), Decimal("0.05"))

    def test_no_expenses_yields_no_buckets(self) -> None:
        breakdown = category_breakdown(date(2024, 5, 1), date(2024, 5, 31), [], [])

        self.assertEqual(breakdown, [])

    def test_rejects_inverted_range(self) -> None:
        with self.assertRaises(ValidationError):
            category_breakdown(date(2024, 5, 31), date(2024, 5, 1), [])


class TrendAndForecastTests(unittest.TestCase):
    def setUp(self) -> None:
        self.incomes = [make_event("monthly", "3000", date(2024, 1, 1))]
        self.expenses = [
            make_event("monthly", "1200", date(2024, 1, 1)),
            make_event("once", "400", date(2024, 5, 12)),
        ]

    def test_monthly_trend_ends_with_current_month(self) -> None:
        trend = monthly_trend(3, self.expenses, self.incomes, today=date(2024, 6, 20))

        self.assertEqual([entry.label for entry in trend], ["2024-04", "2024-05", "2024-06"])
        self.assertEqual(
            [entry.expenses for entry in trend],
            [Decimal("1200.00"), Decimal("1600.00"), Decimal("1200.00")],
        )
        for entry in trend:
            self.assertEqual(entry.savings, entry.income - entry.expenses)

    def test_horizon_defaults_to_settings(self) -> None:
        settings = ProjectionSettings(forecast_months=4)

        trend = monthly_trend(None, self.expenses, self.incomes, today=date(2024, 6, 20), settings=settings)
        result = forecast(None, self.expenses, self.incomes, today=date(2024, 6, 20), settings=settings)

        self.assertEqual(len(trend), 4)
        self.assertEqual(result.months, 4)
        self.assertEqual(len(result.monthly_details), 4)

    def test_trend_rejects_zero_months(self) -> None:
        with self.assertRaises(ValidationError):
            monthly_trend(0, self.expenses, self.incomes, today=date(2024, 6, 20))

    def test_year_overview_has_twelve_months(self) -> None:
        overview = year_overview(2024, self.expenses, self.incomes)

        self.assertEqual(len(overview), 12)
        self.assertEqual(overview[4].expenses, Decimal("1600.00"))
        self.assertEqual(overview[0].label, "2024-01")

    def test_forecast_smooths_yearly_income(self) -> None:
        bonus = make_event("yearly", "12000.00", date(2024, 3, 15))

        result = forecast(6, [], [bonus], today=date(2024, 5, 1))

        self.assertEqual(
            [detail.income for detail in result.monthly_details], [Decimal("1000.00")] * 6
        )
        self.assertEqual(result.projected_income, Decimal("6000.00"))
        self.assertEqual(result.projected_balance, Decimal("6000.00"))

    def test_forecast_totals(self) -> None:
        result = forecast(3, self.expenses, self.incomes, today=date(2024, 4, 2))

        self.assertEqual(
            [(detail.year, detail.month) for detail in result.monthly_details],
            [(2024, 4), (2024, 5), (2024, 6)],
        )
        self.assertEqual(result.projected_income, Decimal("9000.00"))
        self.assertEqual(result.projected_expenses, Decimal("4000.00"))
        self.assertEqual(result.projected_balance, Decimal("5000.00"))


class SummaryReportTests(unittest.TestCase):
    def test_savings_progress(self) -> None:
        incomes = [make_event("monthly", "3000", date(2024, 1, 1))]
        expenses = [make_event("monthly", "1200", date(2024, 1, 1))]

        progress = savings_progress(6, 2024, expenses, incomes)

        self.assertEqual(progress.savings_amount, Decimal("1800.00"))
        self.assertEqual(progress.savings_rate, Decimal("60.00"))

    def test_savings_rate_is_zero_without_income(self) -> None:
        expenses = [make_event("monthly", "100", date(2024, 1, 1))]

        progress = savings_progress(6, 2024, expenses, [])

        self.assertEqual(progress.savings_amount, Decimal("-100.00"))
        self.assertEqual(progress.savings_rate, Decimal("0"))

    def test_normalized_expenses(self) -> None:
        expenses = [
            make_event("weekly", "100", date(2024, 1, 1)),
            make_event("quarterly", "300", date(2024, 1, 1)),
            make_event("once", "999", date(2024, 1, 1)),
        ]

        result = normalized_expenses(expenses)

        self.assertEqual(
            [item.monthly_amount for item in result.items],
            [Decimal("433.00"), Decimal("100.00"), Decimal("0.00")],
        )
        self.assertEqual(result.total, Decimal("533.00"))

    def test_dashboard_stats(self) -> None:
        accounts = [
            Account(id=1, current_balance=Decimal("1000"), type="checking", currency="EUR"),
            Account(id=2, current_balance=Decimal("1080"), type="savings", currency="USD"),
        ]
        incomes = [make_event("monthly", "3000", date(2024, 1, 1))]
        expenses = [make_event("monthly", "1200", date(2024, 1, 1))]
        spending = [SpendingEntry(amount=Decimal("300"), date=date(2024, 6, 4))]

        stats = dashboard_stats(
            accounts,
            expenses,
            incomes,
            spending,
            today=date(2024, 6, 15),
            settings=ProjectionSettings(home_currency="EUR"),
            rate_provider=StaticRateProvider(),
        )

        self.assertEqual(stats.total_assets, Decimal("2000.00"))
        self.assertEqual(stats.monthly_income, Decimal("3000.00"))
        self.assertEqual(stats.monthly_expenses, Decimal("1500.00"))
        self.assertEqual(stats.savings, Decimal("1500.00"))
        self.assertEqual(stats.income_trend, Decimal("0"))
        self.assertEqual(stats.expense_trend, Decimal("25.00"))

    def test_dashboard_trend_is_zero_without_previous_month(self) -> None:
        incomes = [make_event("monthly", "3000", date(2024, 6, 1))]

        stats = dashboard_stats([], [], incomes, today=date(2024, 6, 15))

        self.assertEqual(stats.total_assets, Decimal("0"))
        self.assertEqual(stats.income_trend, Decimal("0"))
        self.assertEqual(stats.expense_trend, Decimal("0"))


if __name__ == "__main__":
    unittest.main()
