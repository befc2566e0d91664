from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, List, Optional
from engine.valuation import value_at
from portfolio.holding import Holding, new_identifier

logger = logging.getLogger(__name__)


@dataclass
class Portfolio:
    """Ordered, owned collection of holdings.

    Insertion order is display order only; valuation does not depend on it.
    No two live holdings share an identifier.
    """

    holdings: List[Holding] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.holdings)

    def __iter__(self) -> Iterator[Holding]:
        return iter(self.holdings)

    def add(self, holding: Holding) -> Holding:
        if holding.identifier is None:
            holding.identifier = new_identifier()
        elif self.get(holding.identifier) is not None:
            raise ValueError(f"Holding {holding.identifier} is already in the portfolio")
        self.holdings.append(holding)
        logger.info("Added %s holding %r (%s)", holding.kind.value, holding.display_name, holding.identifier)
        return holding

    def get(self, identifier: uuid.UUID) -> Optional[Holding]:
        for h in self.holdings:
            if h.identifier == identifier:
                return h
        return None

    def remove_by_identifier(self, identifier: uuid.UUID) -> None:
        for i, h in enumerate(self.holdings):
            if h.identifier == identifier:
                del self.holdings[i]
                logger.info("Removed holding %r (%s)", h.display_name, identifier)
                return

    def mark_for_removal(self, identifier: uuid.UUID) -> bool:
        h = self.get(identifier)
        if h is None:
            return False
        h.request_removal()
        return True

    def purge_marked(self) -> List[uuid.UUID]:
        """Maintenance pass: drop every holding flagged for removal.

        Identifiers are collected first and removed afterwards so the list
        is never mutated while it is being scanned.
        """
        doomed = [h.identifier for h in self.holdings if h.marked_for_removal]
        for identifier in doomed:
            self.remove_by_identifier(identifier)
        return doomed

    def total_value_at(self, on: date) -> float:
        # Plain left-to-right accumulation, the same order sample_portfolio sums in.
        total = 0.0
        for h in self.holdings:
            total += value_at(h, on)
        return total

    def net_worth_at(self, on: date) -> float:
        """Assets minus liability balances (loans count against the total)."""
        total = 0.0
        for h in self.holdings:
            v = value_at(h, on)
            total += -v if h.is_liability else v
        return total
