"""Holding valuation engine.

Projects a holding's value to an arbitrary date with closed-form or
bounded-iteration formulas. Every function here is pure: the result only
depends on the holding's fields and the requested date.

Formulas per kind:
- Real estate: compound growth at the annual rate over fractional years.
- Loan: per period, accrue interest then subtract the payment (floored at
  zero); the trailing partial period accrues prorated interest only.
- Tradable: compounded initial stake plus each contribution compounded
  from its own deposit date.
- Cash: contributions added at face value, floored at zero, no growth.
"""
from __future__ import annotations

import math
from datetime import date
from typing import Callable, Dict

from common.dates import DAYS_PER_YEAR, add_days, days_between
from portfolio.holding import Cash, Holding, HoldingKind, Loan, RealEstate, Tradable


def growth_factor(annual_rate: float, days: float) -> float:
    """Growth multiplier for `days` at `annual_rate` percent per year.

    Rates below -100% have no real fractional power; those give nan.
    """
    base = 1.0 + annual_rate / 100.0
    exponent = days / DAYS_PER_YEAR
    if base < 0 and not float(exponent).is_integer():
        return math.nan
    return base ** exponent


def _real_estate_value(h: RealEstate, elapsed_days: int, on: date) -> float:
    return h.base_value * growth_factor(h.annual_rate, elapsed_days)


def _loan_value(h: Loan, elapsed_days: int, on: date) -> float:
    interval_days = h.payment_frequency.interval_days
    rate_per_interval = growth_factor(h.annual_rate, interval_days) - 1.0

    full_periods = elapsed_days // interval_days
    remainder_days = elapsed_days - full_periods * interval_days

    balance = h.base_value
    for _ in range(full_periods):
        balance += balance * rate_per_interval
        balance = max(balance - h.periodic_payment, 0.0)

    # Payments only happen on full period boundaries.
    if balance > 0 and remainder_days > 0:
        balance += balance * (growth_factor(h.annual_rate, remainder_days) - 1.0)

    return max(balance, 0.0)


def _tradable_value(h: Tradable, elapsed_days: int, on: date) -> float:
    compounded_initial = h.base_value * growth_factor(h.annual_rate, elapsed_days)

    interval_days = h.contribution_frequency.interval_days
    num_periods = elapsed_days // interval_days

    compounded_contributions = 0.0
    for i in range(1, num_periods + 1):
        deposit_date = add_days(h.acquisition_date, i * interval_days)
        if deposit_date > on:
            break
        compounded_contributions += h.periodic_contribution * growth_factor(
            h.annual_rate, days_between(deposit_date, on)
        )

    return compounded_initial + compounded_contributions


def _cash_value(h: Cash, elapsed_days: int, on: date) -> float:
    num_periods = elapsed_days // h.contribution_frequency.interval_days
    balance = h.base_value
    for _ in range(num_periods):
        balance = max(balance + h.periodic_contribution, 0.0)
    return balance


_VALUATORS: Dict[HoldingKind, Callable[..., float]] = {
    HoldingKind.REAL_ESTATE: _real_estate_value,
    HoldingKind.LOAN: _loan_value,
    HoldingKind.TRADABLE: _tradable_value,
    HoldingKind.CASH: _cash_value,
}


def value_at(holding: Holding, on: date) -> float:
    """Value of `holding` on date `on`.

    Dates at or before the acquisition date return `base_value` unchanged;
    there is no projection into the past.

    Raises:
        TypeError: If `holding` is not one of the concrete holding kinds.
    """
    kind = getattr(holding, "kind", None)
    valuator = _VALUATORS.get(kind)
    if valuator is None:
        raise TypeError(f"Unsupported holding type: {type(holding).__name__}")

    if on <= holding.acquisition_date:
        return float(holding.base_value)

    elapsed_days = days_between(holding.acquisition_date, on)
    return float(valuator(holding, elapsed_days, on))
