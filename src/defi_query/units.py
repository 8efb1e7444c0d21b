from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from .constants import RAY, WAD


def ray_to_percent(value: Any) -> float:
    """Convert a ray-encoded (1e27) rate into a percentage.

    Args:
        value: Integer or integer string scaled by 10**27.

    Returns:
        The rate in percent, rounded to 4 decimal places. Anything that is
        not an integer yields 0.
    """
    try:
        raw = int(str(value))
    except (TypeError, ValueError):
        return 0.0
    percent = Decimal(raw) / Decimal(RAY) * 100
    return round(float(percent), 4)


def wad_to_percent(value: Any, places: int = 2) -> float:
    """Convert a WAD (1e18) fraction into a percentage."""
    try:
        raw = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return 0.0
    if not raw.is_finite():
        return 0.0
    return round(float(raw / Decimal(WAD) * 100), places)


def parse_usd(value: Any) -> float:
    """Parse a decimal USD string, mapping missing or non-numeric input to 0."""
    if value is None:
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def fraction_to_percent(value: Any, places: int) -> float:
    """Scale a 0-1 fraction to a percentage rounded to ``places``."""
    return round(parse_usd(value) * 100, places)


def fee_tier_to_bps(fee_tier: Any) -> float:
    """Uniswap fee tiers are hundredths of a bip (500 -> 5 bps)."""
    try:
        return int(str(fee_tier)) / 100
    except (TypeError, ValueError):
        return 0.0


def parse_count(value: Any) -> int:
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return 0
