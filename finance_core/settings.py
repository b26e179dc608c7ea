from __future__ import annotations

import os
from dataclasses import dataclass

from finance_core.currency_conversion import normalize_currency
from finance_core.recurrence import YEARLY_SMOOTHED, ValidationError, normalize_yearly_mode

DEFAULT_HOME_CURRENCY = "EUR"
DEFAULT_FORECAST_MONTHS = 6


@dataclass(frozen=True)
class ProjectionSettings:
    home_currency: str = DEFAULT_HOME_CURRENCY
    income_yearly_mode: str = YEARLY_SMOOTHED
    forecast_months: int = DEFAULT_FORECAST_MONTHS

    def __post_init__(self) -> None:
        object.__setattr__(self, "home_currency", normalize_currency(self.home_currency))
        object.__setattr__(
            self, "income_yearly_mode", normalize_yearly_mode(self.income_yearly_mode)
        )
        if isinstance(self.forecast_months, bool) or not isinstance(self.forecast_months, int):
            raise ValidationError("forecast_months must be an integer.")
        if self.forecast_months < 1:
            raise ValidationError("forecast_months must be at least 1.")


def get_home_currency() -> str:
    raw = os.getenv("HOME_CURRENCY", DEFAULT_HOME_CURRENCY)
    try:
        return normalize_currency(raw)
    except ValueError:
        return DEFAULT_HOME_CURRENCY


def get_income_yearly_mode() -> str:
    raw = os.getenv("INCOME_YEARLY_MODE", YEARLY_SMOOTHED)
    try:
        return normalize_yearly_mode(raw)
    except ValueError:
        return YEARLY_SMOOTHED


def get_forecast_months() -> int:
    raw = os.getenv("FORECAST_MONTHS", str(DEFAULT_FORECAST_MONTHS))
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_FORECAST_MONTHS
    return value if value >= 1 else DEFAULT_FORECAST_MONTHS


def load_settings() -> ProjectionSettings:
    return ProjectionSettings(
        home_currency=get_home_currency(),
        income_yearly_mode=get_income_yearly_mode(),
        forecast_months=get_forecast_months(),
    )
