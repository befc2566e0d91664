from __future__ import annotations
from datetime import date
from typing import Any, Dict
from engine.valuation import value_at
from portfolio.portfolio import Portfolio
from reporting.colors import holding_color, to_hex


def portfolio_summary(portfolio: Portfolio, as_of: date) -> Dict[str, Any]:
    return {
        "as_of": as_of.isoformat(),
        "total_value": portfolio.total_value_at(as_of),
        "net_worth": portfolio.net_worth_at(as_of),
        "holdings": [
            {
                "identifier": str(h.identifier),
                "name": h.display_name,
                "kind": h.kind.value,
                "value": value_at(h, as_of),
                "color": to_hex(holding_color(h.identifier, h.kind)),
            }
            for h in portfolio
        ],
    }
