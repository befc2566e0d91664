"""Chart line colors derived from holding identifiers.

Colors are deterministic: the same identifier always maps to the same
shade, so a holding keeps its color across redraws and restarts.
"""
from __future__ import annotations

import uuid
from functools import reduce
from typing import Tuple

from portfolio.holding import HoldingKind

RGB = Tuple[int, int, int]


def identifier_byte(identifier: uuid.UUID) -> int:
    """XOR of all identifier bytes, 0..255."""
    return reduce(lambda acc, b: acc ^ b, identifier.bytes, 0)


def holding_color(identifier: uuid.UUID, kind: HoldingKind) -> RGB:
    b = identifier_byte(identifier)
    if kind is HoldingKind.TRADABLE:
        return (0, b, 0)
    if kind is HoldingKind.CASH:
        return (70, b, b)
    if kind is HoldingKind.LOAN:
        return (b, 0, 0)
    return (b, b, 70)


def to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)
