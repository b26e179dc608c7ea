from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from finance_core.money import coerce_amount

BASE_CURRENCY = "EUR"

DEFAULT_RATES: dict[str, Decimal] = {
    "EUR": Decimal("1"),
    "USD": Decimal("1.08"),
    "GBP": Decimal("0.85"),
    "CHF": Decimal("0.94"),
    "DKK": Decimal("7.46"),
}


@dataclass(frozen=True)
class StaticRateProvider:
    """Fixed FX rates, expressed as target currency per 1 EUR."""

    rates: Mapping[str, Decimal] | None = None

    def __post_init__(self) -> None:
        normalized = {}
        for code, rate in (self.rates or DEFAULT_RATES).items():
            coerced = coerce_amount(rate)
            if not coerced.is_finite() or coerced <= 0:
                raise ValueError(f"Rate for {code} must be greater than zero.")
            normalized[normalize_currency(code)] = coerced
        object.__setattr__(self, "rates", normalized)

    def get_rate(self, currency: str) -> Decimal:
        normalized = normalize_currency(currency)
        try:
            return self.rates[normalized]
        except KeyError as exc:
            raise ValueError(f"Unsupported currency: {normalized}") from exc


def convert_amount(
    amount: Decimal | int | float | str,
    source_currency: str,
    target_currency: str,
    rate_provider: StaticRateProvider | None = None,
) -> Decimal:
    """Convert an amount between currencies through the EUR base rate."""
    provider = rate_provider or StaticRateProvider()
    normalized_source = normalize_currency(source_currency)
    normalized_target = normalize_currency(target_currency)
    coerced_amount = coerce_amount(amount)

    if normalized_source == normalized_target:
        return coerced_amount

    amount_in_base = coerced_amount / provider.get_rate(normalized_source)
    return amount_in_base * provider.get_rate(normalized_target)


def normalize_currency(value: str) -> str:
    normalized = value.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValueError("Currency must be a 3-letter ISO 4217 code.")
    return normalized
