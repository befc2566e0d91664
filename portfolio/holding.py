"""Holding records.

A holding is one tracked asset or liability. Every kind shares the common
fields on `Holding`; the subclasses add the recurring payment or
contribution that drives their valuation formula (see engine.valuation).
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar, Optional


class Frequency(Enum):
    """Recurrence of a loan payment or a contribution."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def interval_days(self) -> int:
        return _INTERVAL_DAYS[self]


_INTERVAL_DAYS = {
    Frequency.WEEKLY: 7,
    Frequency.MONTHLY: 30,
    Frequency.YEARLY: 365,
}


class HoldingKind(Enum):
    REAL_ESTATE = "real_estate"
    LOAN = "loan"
    TRADABLE = "tradable"
    CASH = "cash"


def new_identifier() -> uuid.UUID:
    return uuid.uuid4()


@dataclass
class Holding:
    """Fields common to every holding kind.

    Attributes:
        display_name: Free-text label shown in lists and chart legends.
        base_value: Value on the acquisition date. May be negative.
        annual_rate: Yearly rate in percent (5.0 means 5%).
        acquisition_date: Values at or before this date are `base_value`.
        identifier: Assigned by `Portfolio.add` when left as None.
        marked_for_removal: Set by the front end; purged on the next
            maintenance pass.
    """

    display_name: str
    base_value: float
    annual_rate: float
    acquisition_date: date
    identifier: Optional[uuid.UUID] = None
    marked_for_removal: bool = False

    kind: ClassVar[HoldingKind]
    is_liability: ClassVar[bool] = False

    def request_removal(self) -> None:
        self.marked_for_removal = True


@dataclass
class RealEstate(Holding):
    kind: ClassVar[HoldingKind] = HoldingKind.REAL_ESTATE


@dataclass
class Loan(Holding):
    """Amortizing balance: interest accrues, then the payment is taken."""

    periodic_payment: float = 0.0
    payment_frequency: Frequency = Frequency.MONTHLY

    kind: ClassVar[HoldingKind] = HoldingKind.LOAN
    is_liability: ClassVar[bool] = True


@dataclass
class Tradable(Holding):
    """Compounding investment with recurring contributions."""

    periodic_contribution: float = 0.0
    contribution_frequency: Frequency = Frequency.MONTHLY

    kind: ClassVar[HoldingKind] = HoldingKind.TRADABLE


@dataclass
class Cash(Holding):
    """Cash account; contributions are added at face value."""

    periodic_contribution: float = 0.0
    contribution_frequency: Frequency = Frequency.MONTHLY

    kind: ClassVar[HoldingKind] = HoldingKind.CASH


HOLDING_TYPES = {
    HoldingKind.REAL_ESTATE: RealEstate,
    HoldingKind.LOAN: Loan,
    HoldingKind.TRADABLE: Tradable,
    HoldingKind.CASH: Cash,
}
