"""Portfolio persistence.

Reads and writes the YAML document holding the portfolio's holdings and
its display settings. Each holding maps one-to-one to a record; the
transient removal flag is never written.
"""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from common.config_loader import DisplaySettings, dump_yaml, load_all
from common.dates import parse_date
from portfolio.holding import HOLDING_TYPES, Frequency, Holding, HoldingKind
from portfolio.portfolio import Portfolio

logger = logging.getLogger(__name__)


class PortfolioFileError(Exception):
    """Error raised when a persisted portfolio cannot be interpreted."""

    pass


COMMON_FIELDS = ("identifier", "kind", "display_name", "base_value", "annual_rate", "acquisition_date")

# kind -> (amount field, frequency field)
RECURRING_FIELDS = {
    HoldingKind.LOAN: ("periodic_payment", "payment_frequency"),
    HoldingKind.TRADABLE: ("periodic_contribution", "contribution_frequency"),
    HoldingKind.CASH: ("periodic_contribution", "contribution_frequency"),
}

# Rates below -100% would raise a negative base to a fractional power.
MIN_ANNUAL_RATE = -100.0


def holding_to_record(h: Holding) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "identifier": str(h.identifier) if h.identifier is not None else None,
        "kind": h.kind.value,
        "display_name": h.display_name,
        "base_value": float(h.base_value),
        "annual_rate": float(h.annual_rate),
        "acquisition_date": h.acquisition_date,
    }
    fields = RECURRING_FIELDS.get(h.kind)
    if fields:
        amount_field, freq_field = fields
        record[amount_field] = float(getattr(h, amount_field))
        record[freq_field] = getattr(h, freq_field).value
    return record


def _enum_value(enum_cls, raw: Any, what: str):
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise PortfolioFileError(f"Unknown {what} {raw!r} (expected one of: {choices})") from None


def _number(record: Dict[str, Any], key: str, default: float | None = None) -> float:
    raw = record.get(key, default)
    if raw is None:
        raise PortfolioFileError(f"Holding record is missing '{key}': {record}")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise PortfolioFileError(f"Field '{key}' must be a number, got {raw!r}") from None


def holding_from_record(record: Dict[str, Any]) -> Holding:
    if "kind" not in record:
        raise PortfolioFileError(f"Holding record is missing 'kind': {record}")
    kind = _enum_value(HoldingKind, record["kind"], "holding kind")

    try:
        acquired = parse_date(record.get("acquisition_date"))
    except ValueError as e:
        raise PortfolioFileError(f"Bad acquisition_date in holding record: {e}") from None

    identifier = record.get("identifier")
    if identifier is not None:
        try:
            identifier = uuid.UUID(str(identifier))
        except ValueError:
            raise PortfolioFileError(f"Bad identifier {identifier!r}") from None

    annual_rate = _number(record, "annual_rate", 0.0)
    if annual_rate < MIN_ANNUAL_RATE:
        raise PortfolioFileError(f"annual_rate must be >= {MIN_ANNUAL_RATE}, got {annual_rate}")

    kwargs: Dict[str, Any] = {
        "display_name": str(record.get("display_name") or kind.value.replace("_", " ").title()),
        "base_value": _number(record, "base_value"),
        "annual_rate": annual_rate,
        "acquisition_date": acquired,
        "identifier": identifier,
    }
    fields = RECURRING_FIELDS.get(kind)
    if fields:
        amount_field, freq_field = fields
        kwargs[amount_field] = _number(record, amount_field, 0.0)
        kwargs[freq_field] = _enum_value(Frequency, record.get(freq_field, "monthly"), "frequency")

    allowed = set(COMMON_FIELDS) | set(fields or ())
    extra = sorted(set(record) - allowed)
    if extra:
        logger.warning("Ignoring unknown fields %s on holding %r", extra, kwargs["display_name"])

    return HOLDING_TYPES[kind](**kwargs)


def _whole_number(raw: Any, key: str) -> int:
    if isinstance(raw, bool):
        raise PortfolioFileError(f"Field '{key}' must be a whole number, got {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise PortfolioFileError(f"Field '{key}' must be a whole number, got {raw!r}") from None
    if not value.is_integer():
        raise PortfolioFileError(f"Field '{key}' must be a whole number, got {raw!r}")
    return int(value)


def settings_to_record(settings: DisplaySettings) -> Dict[str, Any]:
    return {
        "label": settings.label,
        "start_date": settings.start_date,
        "end_date": settings.end_date,
        "interval_days": settings.interval_days,
    }


def settings_from_record(record: Dict[str, Any]) -> DisplaySettings:
    base = DisplaySettings()
    try:
        start = record.get("start_date")
        settings = DisplaySettings(
            label=str(record.get("label", base.label)),
            start_date=parse_date(start) if start is not None else None,
            end_date=parse_date(record.get("end_date", base.end_date)),
            interval_days=_whole_number(record.get("interval_days", base.interval_days), "interval_days"),
        )
    except (TypeError, ValueError) as e:
        raise PortfolioFileError(f"Bad display settings: {e}") from None
    if settings.interval_days < 1:
        raise PortfolioFileError(f"interval_days must be >= 1, got {settings.interval_days}")
    return settings


def portfolio_from_records(records: List[Dict[str, Any]]) -> Portfolio:
    portfolio = Portfolio()
    for record in records:
        if not isinstance(record, dict):
            raise PortfolioFileError(f"Holding record must be a mapping, got {record!r}")
        h = holding_from_record(record)
        try:
            portfolio.add(h)
        except ValueError as e:
            raise PortfolioFileError(str(e)) from None
    return portfolio


def load_portfolio(path: str | Path) -> Tuple[Portfolio, DisplaySettings]:
    try:
        cfg = load_all(path)
    except (yaml.YAMLError, ValueError, TypeError) as e:
        raise PortfolioFileError(f"Could not read {path}: {e}") from e

    portfolio = portfolio_from_records(cfg.holdings)
    settings = settings_from_record(cfg.settings)
    logger.info("Loaded %d holdings from %s", len(portfolio), path)
    return portfolio, settings


def save_portfolio(portfolio: Portfolio, settings: DisplaySettings, path: str | Path) -> None:
    data = {
        "settings": settings_to_record(settings),
        "holdings": [holding_to_record(h) for h in portfolio],
    }
    dump_yaml(data, path)
    logger.info("Saved %d holdings to %s", len(portfolio), path)
