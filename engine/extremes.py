"""Value-axis extremes for portfolio charts."""
from __future__ import annotations

from datetime import date
from typing import List, Tuple

from engine.sampler import SamplePoint, sample_portfolio
from portfolio.portfolio import Portfolio


def extremes(series: List[SamplePoint]) -> Tuple[float, float]:
    """Minimum and maximum value of a non-empty series.

    Raises:
        ValueError: If `series` is empty.
    """
    if not series:
        raise ValueError("extremes() of an empty series")
    lo = hi = series[0].value
    for point in series[1:]:
        if point.value < lo:
            lo = point.value
        elif point.value > hi:
            hi = point.value
    return lo, hi


def portfolio_extremes(
    portfolio: Portfolio,
    start_date: date,
    end_date: date,
    interval_days: int,
) -> Tuple[float, float]:
    """Extremes of the aggregate series; (0.0, 0.0) when it is empty."""
    series = sample_portfolio(portfolio, start_date, end_date, interval_days)
    if not series:
        return 0.0, 0.0
    return extremes(series)


def value_axis_range(
    portfolio: Portfolio,
    start_date: date,
    end_date: date,
    interval_days: int,
) -> Tuple[float, float]:
    """Aggregate extremes widened so the axis always includes zero."""
    lo, hi = portfolio_extremes(portfolio, start_date, end_date, interval_days)
    return min(lo, 0.0), max(hi, 0.0)
