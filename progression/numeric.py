"""Pure numeric helpers: logarithms, multiplier folding and display formatting.

Nothing here touches game state.  The formatting helpers are display-only and
never raise; malformed input produces a best-effort string instead.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple
import math

import numpy as np

# SI-style suffixes, one per factor of 1000
UNITS: Tuple[str, ...] = ("", "k", "M", "B", "T", "q", "Q", "Sx", "Sp", "Oc")

# Coin tiers: platinum, gold, silver; the remainder is copper
COIN_TIERS: Tuple[str, ...] = ("p", "g", "s")
COIN_COLORS = {
    "p": "#79b9c7",
    "g": "#E5C100",
    "s": "#a8a8a8",
    "c": "#a15c2f",
}


def get_base_log(base: float, value: float) -> float:
    """Return the logarithm of ``value`` in ``base``."""
    return float(np.log(value) / np.log(base))


def round_half_up(value: float) -> float:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def fold_multipliers(factors: Iterable[float]) -> float:
    """Return the product of ``factors`` (``1`` for an empty chain)."""
    values = np.fromiter((float(f) for f in factors), dtype=np.float64)
    if values.size == 0:
        return 1.0
    return float(np.prod(values))


def apply_multipliers(value: float, factors: Iterable[float]) -> float:
    """Scale ``value`` by every factor in order and round the result."""
    return round_half_up(value * fold_multipliers(factors))


def apply_speed(value: float, game_speed: float, update_speed: float) -> float:
    """Convert a per-day rate to the amount earned in a single tick."""
    return value * game_speed / update_speed


def _plain(number: float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    if isinstance(number, float):
        return f"{number:g}"
    return str(number)


def format_number(number: float) -> str:
    """Format ``number`` with one decimal and an SI suffix.

    Values below 1000 (and anything that is not a finite positive number)
    are returned unsuffixed.
    """
    try:
        number = float(number)
    except (TypeError, ValueError):
        return str(number)
    if not math.isfinite(number) or number <= 0:
        return _plain(number)

    tier = int(math.log10(number) / 3)
    if tier <= 0:
        return _plain(number)
    tier = min(tier, len(UNITS) - 1)

    scaled = number / 10 ** (tier * 3)
    return f"{scaled:.1f}{UNITS[tier]}"


def format_coins(coins: float) -> List[Tuple[str, str]]:
    """Split a copper amount into ``(text, colour)`` segments.

    Returns four segments for platinum, gold, silver and copper.  Higher
    tiers with a zero amount have empty text.  The copper segment is empty
    when nothing is left over from a positive balance.
    """
    try:
        coins = float(coins)
    except (TypeError, ValueError):
        coins = 0.0
    if not math.isfinite(coins):
        coins = 0.0

    segments: List[Tuple[str, str]] = []
    left_over = coins
    for i, tier in enumerate(COIN_TIERS):
        scale = 10 ** ((len(COIN_TIERS) - i) * 2)
        x = math.floor(left_over / scale)
        left_over = math.floor(left_over - x * scale)
        text = format_number(x) + tier + " " if x > 0 else ""
        segments.append((text, COIN_COLORS[tier]))

    if left_over == 0 and coins > 0:
        segments.append(("", COIN_COLORS["c"]))
    else:
        segments.append((f"{math.floor(left_over)}c", COIN_COLORS["c"]))
    return segments


def format_effect(value: float, decimals: int = 2) -> str:
    """Return ``x<value>`` with a fixed number of decimals."""
    try:
        return f"x{float(value):.{decimals}f}"
    except (TypeError, ValueError):
        return f"x{value}"
