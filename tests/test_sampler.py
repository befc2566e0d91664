"""Tests for time-series sampling and extremes."""
from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd
import pytest

from common.dates import add_days
from engine.extremes import extremes, portfolio_extremes, value_axis_range
from engine.sampler import (
    SamplePoint,
    plot_points,
    portfolio_frame,
    sample,
    sample_holding,
    sample_portfolio,
    sample_total,
    to_series,
)
from engine.valuation import value_at
from portfolio.holding import Cash, Frequency, Loan, RealEstate, Tradable
from portfolio.portfolio import Portfolio


ACQUIRED = date(2024, 1, 1)


def make_portfolio() -> Portfolio:
    """Helper to create a mixed test portfolio."""
    p = Portfolio()
    p.add(RealEstate("Primary Residence", 1000000.0, 5.0, ACQUIRED))
    p.add(RealEstate("Rental Property", -500000.0, 3.0, ACQUIRED))
    p.add(Loan("House Loan", 500000.0, 7.0, ACQUIRED, periodic_payment=3000.0))
    p.add(Tradable(
        "Stocks", 20000.0, 8.0, date(2024, 3, 10),
        periodic_contribution=200.0, contribution_frequency=Frequency.WEEKLY,
    ))
    p.add(Cash("Cash", 3000.0, 0.0, ACQUIRED, periodic_contribution=-25.0))
    return p


class TestSample:
    """Tests for the fixed-step date walk."""

    def test_first_date_is_start_and_last_within_end(self):
        """Stepping 4 days over 1..10 Jan yields 1, 5, 9."""
        points = sample(lambda d: 1.0, date(2024, 1, 1), date(2024, 1, 10), 4)
        assert [p.date for p in points] == [date(2024, 1, 1), date(2024, 1, 5), date(2024, 1, 9)]

    def test_end_date_inclusive(self):
        """A step landing exactly on the end date is emitted."""
        points = sample(lambda d: 1.0, date(2024, 1, 1), date(2024, 1, 10), 3)
        assert len(points) == 4
        assert points[-1].date == date(2024, 1, 10)

    def test_start_after_end_is_empty(self):
        """An inverted range is an empty result, not an error."""
        assert sample(lambda d: 1.0, date(2024, 2, 1), date(2024, 1, 1), 1) == []

    def test_single_day_range(self):
        """start == end yields exactly one point."""
        assert len(sample(lambda d: 1.0, ACQUIRED, ACQUIRED, 30)) == 1

    @pytest.mark.parametrize("interval", [0, -7])
    def test_non_positive_interval_is_empty(self, interval):
        """A non-positive step never loops forever."""
        assert sample(lambda d: 1.0, date(2024, 1, 1), date(2024, 12, 31), interval) == []

    def test_values_come_from_value_fn(self):
        """Each point carries value_fn evaluated at its date."""
        points = sample(lambda d: float(d.day), date(2024, 1, 1), date(2024, 1, 3), 1)
        assert [p.value for p in points] == [1.0, 2.0, 3.0]

    def test_restartable(self):
        """Sampling twice gives identical sequences."""
        h = RealEstate("House", 100.0, 5.0, ACQUIRED)
        a = sample_holding(h, ACQUIRED, date(2026, 1, 1), 30)
        b = sample_holding(h, ACQUIRED, date(2026, 1, 1), 30)
        assert a == b

    def test_holding_series_matches_value_at(self):
        """Per-holding sampling is value_at at each sampled date."""
        h = Loan("Loan", 10000.0, 5.0, ACQUIRED, periodic_payment=300.0)
        for p in sample_holding(h, date(2023, 12, 1), date(2026, 1, 1), 11):
            assert p.value == value_at(h, p.date)

    def test_range_ending_at_last_representable_date(self):
        """Stepping toward date.max stops instead of overflowing."""
        points = sample(lambda d: 1.0, add_days(date.max, -3), date.max, 2)
        assert [p.date for p in points] == [add_days(date.max, -3), add_days(date.max, -1)]

    def test_step_landing_on_last_representable_date(self):
        """A step that reaches date.max exactly still emits it."""
        points = sample(lambda d: 1.0, add_days(date.max, -4), date.max, 2)
        assert points[-1].date == date.max
        assert len(points) == 3


class TestAggregate:
    """Tests for the aggregate portfolio series."""

    def test_indexwise_sum_equals_total_sampling(self):
        """Summing per-holding series equals sampling total_value_at."""
        p = make_portfolio()
        start, end = date(2023, 11, 1), date(2027, 6, 30)

        summed = sample_portfolio(p, start, end, 7)
        direct = sample_total(p, start, end, 7)

        assert [s.date for s in summed] == [d.date for d in direct]
        for s, d in zip(summed, direct):
            assert s.value == pytest.approx(d.value)

    def test_empty_portfolio_yields_zero_series(self):
        """Empty portfolio still has every date, valued 0.0."""
        points = sample_portfolio(Portfolio(), ACQUIRED, date(2024, 1, 31), 10)
        assert [p.value for p in points] == [0.0, 0.0, 0.0, 0.0]

    def test_to_series(self):
        """Points convert to a float Series indexed by date."""
        s = to_series([SamplePoint(ACQUIRED, 1.5), SamplePoint(date(2024, 1, 2), 2.5)], "x")
        assert s.name == "x"
        assert s.index.name == "date"
        assert isinstance(s.index, pd.DatetimeIndex)
        assert s.iloc[-1] == 2.5

    def test_portfolio_frame_columns(self):
        """Frame holds one column per holding plus total."""
        p = make_portfolio()
        frame = portfolio_frame(p, ACQUIRED, date(2024, 12, 31), 30)

        assert list(frame.columns) == [
            "Primary Residence", "Rental Property", "House Loan", "Stocks", "Cash", "total",
        ]
        assert len(frame) == 13
        row_sum = frame.drop(columns="total").sum(axis=1)
        assert np.allclose(row_sum.values, frame["total"].values)

    def test_portfolio_frame_disambiguates_duplicate_names(self):
        """Two holdings with one name get distinct columns."""
        p = Portfolio()
        p.add(Cash("Wallet", 1.0, 0.0, ACQUIRED))
        p.add(Cash("Wallet", 2.0, 0.0, ACQUIRED))
        frame = portfolio_frame(p, ACQUIRED, ACQUIRED, 1)
        assert frame.shape == (1, 3)
        assert frame.columns[0] == "Wallet"
        assert frame.columns[1].startswith("Wallet (")

    def test_plot_points(self):
        """Plot rows are [UTC midnight seconds, value]."""
        arr = plot_points([SamplePoint(date(1970, 1, 2), 10.0), SamplePoint(date(1970, 1, 3), 20.0)])
        assert arr.shape == (2, 2)
        assert arr[0, 0] == 86400.0
        assert arr[1, 1] == 20.0
        assert plot_points([]).shape == (0, 2)


class TestExtremes:
    """Tests for aggregate extremes."""

    def test_bounds_every_value(self):
        """min <= every value <= max."""
        series = sample_portfolio(make_portfolio(), ACQUIRED, date(2030, 1, 1), 15)
        lo, hi = extremes(series)
        assert all(lo <= p.value <= hi for p in series)
        assert lo in [p.value for p in series]
        assert hi in [p.value for p in series]

    def test_single_point(self):
        """One point is both min and max."""
        assert extremes([SamplePoint(ACQUIRED, -3.0)]) == (-3.0, -3.0)

    def test_empty_series_rejected(self):
        """The scan is undefined on empty input."""
        with pytest.raises(ValueError):
            extremes([])

    def test_portfolio_extremes_empty_range_is_neutral(self):
        """No samples gives the neutral (0.0, 0.0) range."""
        assert portfolio_extremes(make_portfolio(), date(2025, 1, 1), date(2024, 1, 1), 1) == (0.0, 0.0)

    def test_portfolio_extremes_empty_portfolio(self):
        """An empty portfolio's zero series has zero extremes."""
        assert portfolio_extremes(Portfolio(), ACQUIRED, date(2024, 6, 1), 30) == (0.0, 0.0)

    def test_value_axis_includes_zero(self):
        """The value axis always spans zero."""
        p = Portfolio()
        p.add(RealEstate("House", 100000.0, 5.0, ACQUIRED))
        lo, hi = value_axis_range(p, ACQUIRED, date(2025, 1, 1), 30)
        assert lo == 0.0
        assert hi > 100000.0
