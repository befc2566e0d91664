from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

DEFAULT_PORTFOLIO_PATH = "config/portfolio.yaml"


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def dump_yaml(data: Dict[str, Any], path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


@dataclass(frozen=True)
class DisplaySettings:
    """Portfolio-level chart settings persisted alongside the holdings."""

    label: str = "Wealth Tracker"
    start_date: Optional[date] = None  # None -> today
    end_date: date = date(2030, 1, 1)
    interval_days: int = 1


@dataclass(frozen=True)
class LoadedConfig:
    settings: Dict[str, Any]
    holdings: List[Dict[str, Any]]


def load_all(path: str | Path = DEFAULT_PORTFOLIO_PATH) -> LoadedConfig:
    raw = load_yaml(path)
    if not isinstance(raw, dict):
        raise TypeError(f"Top level of {path} must be a mapping, got {type(raw).__name__}")
    settings = raw.get("settings") or {}
    holdings = raw.get("holdings") or []
    if not isinstance(settings, dict):
        raise TypeError(f"'settings' in {path} must be a mapping, got {type(settings).__name__}")
    if not isinstance(holdings, list):
        raise TypeError(f"'holdings' in {path} must be a list, got {type(holdings).__name__}")
    return LoadedConfig(settings=settings, holdings=holdings)
