"""Starting values for new holdings and the starter portfolio."""
from __future__ import annotations

from datetime import date
from typing import Optional

from common.dates import today as _today
from portfolio.holding import Cash, Frequency, Holding, HoldingKind, Loan, RealEstate, Tradable
from portfolio.portfolio import Portfolio


def default_holding(kind: HoldingKind, acquired: Optional[date] = None) -> Holding:
    """A new holding of `kind` pre-filled with the form's stock values."""
    acquired = acquired or _today()
    if kind is HoldingKind.REAL_ESTATE:
        return RealEstate("Real Estate", 110000.0, 5.0, acquired)
    if kind is HoldingKind.LOAN:
        return Loan(
            "House loan", 500000.0, 7.0, acquired,
            periodic_payment=3000.0, payment_frequency=Frequency.MONTHLY,
        )
    if kind is HoldingKind.TRADABLE:
        return Tradable(
            "Stocks", 1.0, 8.0, acquired,
            periodic_contribution=1.0, contribution_frequency=Frequency.MONTHLY,
        )
    if kind is HoldingKind.CASH:
        return Cash(
            "Cash", 1.0, 0.0, acquired,
            periodic_contribution=1.0, contribution_frequency=Frequency.MONTHLY,
        )
    raise ValueError(f"Unknown holding kind: {kind}")


def seed_portfolio(acquired: Optional[date] = None) -> Portfolio:
    """Starter portfolio: a home, a rental modeled as a liability, and the mortgage."""
    acquired = acquired or _today()
    p = Portfolio()
    p.add(RealEstate("Primary Residence", 1000000.0, 5.0, acquired))
    p.add(RealEstate("Rental Property", -500000.0, 3.0, acquired))
    p.add(Loan(
        "House Loan", 500000.0, 7.0, acquired,
        periodic_payment=3000.0, payment_frequency=Frequency.MONTHLY,
    ))
    return p
