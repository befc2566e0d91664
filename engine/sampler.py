"""Time-series sampling.

Walks a date range at a fixed day step and evaluates a value function at
each step. Used for per-holding lines and for the aggregate portfolio line.

The step is plain day arithmetic; a "monthly" sampling interval is whatever
day count the caller picks and has nothing to do with the loan/contribution
frequencies inside the valuation formulas.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, NamedTuple, Set

import numpy as np
import pandas as pd

from common.dates import add_days, days_between, to_timestamp
from engine.valuation import value_at
from portfolio.holding import Holding
from portfolio.portfolio import Portfolio

logger = logging.getLogger(__name__)


class SamplePoint(NamedTuple):
    date: date
    value: float


def sample(
    value_fn: Callable[[date], float],
    start_date: date,
    end_date: date,
    interval_days: int,
) -> List[SamplePoint]:
    """Evaluate `value_fn` from `start_date` to `end_date` every `interval_days`.

    Args:
        value_fn: Function of a date returning a value.
        start_date: First sampled date.
        end_date: Inclusive upper bound; the last point may fall before it.
        interval_days: Step in days. Must be >= 1; callers validate this.

    Returns:
        Ordered (date, value) points. Empty if start_date > end_date or the
        step is not positive.
    """
    points: List[SamplePoint] = []
    if interval_days < 1:
        return points

    current = start_date
    while current <= end_date:
        points.append(SamplePoint(current, float(value_fn(current))))
        # Stepping past date.max would overflow; nothing later is sampleable.
        if days_between(current, date.max) < interval_days:
            break
        current = add_days(current, interval_days)
    return points


def sample_holding(
    holding: Holding,
    start_date: date,
    end_date: date,
    interval_days: int,
) -> List[SamplePoint]:
    return sample(lambda d: value_at(holding, d), start_date, end_date, interval_days)


def sample_portfolio(
    portfolio: Portfolio,
    start_date: date,
    end_date: date,
    interval_days: int,
) -> List[SamplePoint]:
    """Aggregate series: per-holding series summed index by index.

    An empty portfolio still yields every sampled date, valued 0.0.
    """
    dates = [p.date for p in sample(lambda d: 0.0, start_date, end_date, interval_days)]
    totals = [0.0] * len(dates)
    for h in portfolio:
        for i, point in enumerate(sample_holding(h, start_date, end_date, interval_days)):
            totals[i] += point.value
    logger.debug("Sampled %d holdings over %d dates", len(portfolio), len(dates))
    return [SamplePoint(d, v) for d, v in zip(dates, totals)]


def sample_total(
    portfolio: Portfolio,
    start_date: date,
    end_date: date,
    interval_days: int,
) -> List[SamplePoint]:
    """Aggregate series sampled straight from `Portfolio.total_value_at`."""
    return sample(portfolio.total_value_at, start_date, end_date, interval_days)


def to_series(points: List[SamplePoint], name: str = "value") -> pd.Series:
    index = pd.DatetimeIndex([pd.Timestamp(p.date) for p in points], name="date")
    return pd.Series([p.value for p in points], index=index, name=name, dtype=float)


def _column_names(portfolio: Portfolio) -> List[str]:
    names: List[str] = []
    seen: Set[str] = set()
    for h in portfolio:
        name = h.display_name
        if name in seen or name == "total":
            name = f"{name} ({str(h.identifier)[:8]})"
        seen.add(name)
        names.append(name)
    return names


def portfolio_frame(
    portfolio: Portfolio,
    start_date: date,
    end_date: date,
    interval_days: int,
) -> pd.DataFrame:
    """One column per holding plus a `total` column, indexed by date."""
    columns: Dict[str, pd.Series] = {}
    for name, h in zip(_column_names(portfolio), portfolio):
        columns[name] = to_series(sample_holding(h, start_date, end_date, interval_days), name)

    total = to_series(sample_portfolio(portfolio, start_date, end_date, interval_days), "total")
    frame = pd.DataFrame(columns, index=total.index)
    frame["total"] = total
    return frame


def plot_points(points: List[SamplePoint]) -> np.ndarray:
    """Rows of [UTC midnight timestamp, value], ready for a line plot."""
    if not points:
        return np.empty((0, 2), dtype=float)
    return np.array([[to_timestamp(p.date), p.value] for p in points], dtype=float)
