"""Wealth tracker CLI.

Provides commands for:
- init: Write a starter portfolio file
- value: Holding and portfolio values on a date
- series: Sampled value series over a date range
- summary: Portfolio summary on a date
- add: Add a holding
- remove: Remove a holding by identifier
"""
from __future__ import annotations

import argparse
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from common.config_loader import DEFAULT_PORTFOLIO_PATH, DisplaySettings
from common.dates import parse_date, today
from engine.extremes import extremes, value_axis_range
from engine.sampler import portfolio_frame, sample_holding, to_series
from engine.valuation import value_at
from portfolio.defaults import default_holding, seed_portfolio
from portfolio.holding import Frequency, HoldingKind
from portfolio.portfolio import Portfolio
from portfolio.store import MIN_ANNUAL_RATE, PortfolioFileError, RECURRING_FIELDS, load_portfolio, save_portfolio
from reporting.summary import portfolio_summary

logger = logging.getLogger(__name__)


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, use YYYY-MM-DD") from None


def _load(args) -> Optional[Tuple[Portfolio, DisplaySettings]]:
    """Load the portfolio file, printing an error and returning None on failure."""
    try:
        return load_portfolio(args.portfolio)
    except FileNotFoundError:
        print(f"Error: portfolio file not found: {args.portfolio} (run 'init' first)")
    except PortfolioFileError as e:
        print(f"Error: {e}")
    return None


def _parse_identifier(raw: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(raw)
    except ValueError:
        print(f"Error: invalid holding identifier: {raw}")
        return None


def cmd_init(args) -> int:
    """Handle init command: write the starter portfolio."""
    path = Path(args.portfolio)
    if path.exists() and not args.force:
        print(f"Error: {path} already exists (use --force to overwrite)")
        return 1

    portfolio = seed_portfolio(today())
    save_portfolio(portfolio, DisplaySettings(), path)
    print(f"Wrote starter portfolio with {len(portfolio)} holdings to {path}")
    return 0


def cmd_value(args) -> int:
    """Handle value command: per-holding and total values on a date."""
    loaded = _load(args)
    if loaded is None:
        return 1
    portfolio, _ = loaded
    on = args.date or today()

    print(f"Values on {on.isoformat()}")
    print("=" * 60)
    for h in portfolio:
        print(f"  {h.display_name:24} {h.kind.value:12} ${value_at(h, on):>16,.2f}")
    print("-" * 60)
    print(f"  {'Total':37} ${portfolio.total_value_at(on):>16,.2f}")
    print(f"  {'Net worth':37} ${portfolio.net_worth_at(on):>16,.2f}")
    return 0


def cmd_series(args) -> int:
    """Handle series command: sampled values over a date range."""
    loaded = _load(args)
    if loaded is None:
        return 1
    portfolio, settings = loaded

    start = args.start or settings.start_date or today()
    end = args.end or settings.end_date
    interval = args.interval if args.interval is not None else settings.interval_days
    if interval < 1:
        print(f"Error: --interval must be at least 1 day, got {interval}")
        return 1

    if args.holding:
        identifier = _parse_identifier(args.holding)
        if identifier is None:
            return 1
        holding = portfolio.get(identifier)
        if holding is None:
            print(f"Error: no holding with identifier {identifier}")
            return 1
        points = sample_holding(holding, start, end, interval)
        data = to_series(points, holding.display_name).to_frame()
        lo, hi = extremes(points) if points else (0.0, 0.0)
        lo, hi = min(lo, 0.0), max(hi, 0.0)
    else:
        data = portfolio_frame(portfolio, start, end, interval)
        lo, hi = value_axis_range(portfolio, start, end, interval)

    if args.csv:
        data.to_csv(args.csv)
        print(f"Wrote {len(data)} rows to {args.csv}")
    else:
        print(f"{settings.label}: {start.isoformat()} .. {end.isoformat()} every {interval} day(s)")
        print(data.to_string(float_format=lambda v: f"{v:,.2f}"))

    print(f"\nValue axis: ${lo:,.2f} .. ${hi:,.2f}")
    return 0


def cmd_summary(args) -> int:
    """Handle summary command: portfolio summary on a date."""
    loaded = _load(args)
    if loaded is None:
        return 1
    portfolio, settings = loaded
    summary = portfolio_summary(portfolio, args.date or today())

    print(f"{settings.label} as of {summary['as_of']}")
    print("=" * 60)
    for row in summary["holdings"]:
        print(f"  {row['identifier']}  {row['name']:20} {row['kind']:12} ${row['value']:>14,.2f}  {row['color']}")
    print("-" * 60)
    print(f"  Holdings:   {len(summary['holdings'])}")
    print(f"  Total:      ${summary['total_value']:,.2f}")
    print(f"  Net worth:  ${summary['net_worth']:,.2f}")
    return 0


def cmd_add(args) -> int:
    """Handle add command: add a holding and save."""
    loaded = _load(args)
    if loaded is None:
        return 1
    portfolio, settings = loaded

    kind = HoldingKind(args.kind)
    holding = default_holding(kind, args.acquired or today())
    holding.display_name = args.name
    holding.base_value = args.value
    if args.rate is not None:
        if args.rate < MIN_ANNUAL_RATE:
            print(f"Error: --rate must be >= {MIN_ANNUAL_RATE}, got {args.rate}")
            return 1
        holding.annual_rate = args.rate

    fields = RECURRING_FIELDS.get(kind)
    if fields:
        amount_field, freq_field = fields
        if args.amount is not None:
            setattr(holding, amount_field, args.amount)
        if args.frequency is not None:
            setattr(holding, freq_field, Frequency(args.frequency))
    elif args.amount is not None or args.frequency is not None:
        logger.warning("%s holdings have no recurring amount; ignoring --amount/--frequency", kind.value)

    portfolio.add(holding)
    save_portfolio(portfolio, settings, args.portfolio)
    print(f"Added {kind.value} '{holding.display_name}' ({holding.identifier})")
    return 0


def cmd_remove(args) -> int:
    """Handle remove command: flag a holding and run the maintenance pass."""
    loaded = _load(args)
    if loaded is None:
        return 1
    portfolio, settings = loaded

    identifier = _parse_identifier(args.id)
    if identifier is None:
        return 1

    if not portfolio.mark_for_removal(identifier):
        print(f"No holding with identifier {identifier}; nothing to remove")
        return 0

    removed = portfolio.purge_marked()
    save_portfolio(portfolio, settings, args.portfolio)
    print(f"Removed {len(removed)} holding(s); {len(portfolio)} remaining")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Wealth tracker CLI: project holdings and net worth over time",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--portfolio", default=DEFAULT_PORTFOLIO_PATH, help="Portfolio YAML file")
    common.add_argument("--verbose", "-v", action="store_true", help="Log progress messages")

    # Init command
    init_p = sub.add_parser("init", parents=[common], help="Write a starter portfolio file")
    init_p.add_argument("--force", action="store_true", help="Overwrite an existing file")
    init_p.set_defaults(func=cmd_init)

    # Value command
    val = sub.add_parser("value", parents=[common], help="Holding values on a date")
    val.add_argument("--date", type=_date_arg, default=None, help="Valuation date (default: today)")
    val.set_defaults(func=cmd_value)

    # Series command
    ser = sub.add_parser("series", parents=[common], help="Sampled value series")
    ser.add_argument("--start", type=_date_arg, default=None, help="First date (default: settings or today)")
    ser.add_argument("--end", type=_date_arg, default=None, help="Last date (default: settings)")
    ser.add_argument("--interval", type=int, default=None, help="Sampling step in days")
    ser.add_argument("--holding", default=None, help="Only sample the holding with this identifier")
    ser.add_argument("--csv", default=None, help="Write the series to this CSV file")
    ser.set_defaults(func=cmd_series)

    # Summary command
    summ = sub.add_parser("summary", parents=[common], help="Portfolio summary")
    summ.add_argument("--date", type=_date_arg, default=None, help="Summary date (default: today)")
    summ.set_defaults(func=cmd_summary)

    # Add command
    add = sub.add_parser("add", parents=[common], help="Add a holding")
    add.add_argument("--kind", choices=[k.value for k in HoldingKind], required=True, help="Holding kind")
    add.add_argument("--name", required=True, help="Display name")
    add.add_argument("--value", type=float, required=True, help="Value on the acquisition date")
    add.add_argument("--rate", type=float, default=None, help="Annual rate in percent")
    add.add_argument("--acquired", type=_date_arg, default=None, help="Acquisition date (default: today)")
    add.add_argument("--amount", type=float, default=None, help="Periodic payment or contribution")
    add.add_argument(
        "--frequency",
        choices=[f.value for f in Frequency],
        default=None,
        help="Payment or contribution frequency",
    )
    add.set_defaults(func=cmd_add)

    # Remove command
    rm = sub.add_parser("remove", parents=[common], help="Remove a holding")
    rm.add_argument("--id", required=True, help="Holding identifier")
    rm.set_defaults(func=cmd_remove)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
