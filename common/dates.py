"""Date helpers shared by the valuation engine, the sampler and the CLI.

All arithmetic is plain day counting; nothing here is calendar aware
beyond what `datetime.date` provides.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

DAYS_PER_YEAR = 365.0


def parse_date(value: Any) -> date:
    """Coerce a YAML/CLI value into a `date`.

    Accepts `date`, `datetime` (time part dropped) and ISO strings
    (YYYY-MM-DD). Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Cannot interpret {value!r} as a date")


def days_between(start: date, end: date) -> int:
    return (end - start).days


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def years_between(start: date, end: date) -> float:
    """Fractional years between two dates on a 365-day year."""
    return days_between(start, end) / DAYS_PER_YEAR


def to_timestamp(d: date) -> float:
    """Seconds since the epoch for midnight UTC of `d`."""
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc).timestamp()


def today() -> date:
    return datetime.now(timezone.utc).date()
