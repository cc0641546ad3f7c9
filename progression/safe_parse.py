from __future__ import annotations
"""Helpers for coercing values read from save data to numbers.

Saves come from local storage or from a pasted export string, so any field
may be a string, ``None`` or garbage.  These helpers coerce what they can and
fall back to a default otherwise, logging a warning so malformed saves can be
diagnosed without interrupting the game.
"""

from typing import Any
import math
import logging

logger = logging.getLogger(__name__)


def to_int(value: Any, default: int = 0) -> int:
    """Coerce ``value`` to ``int``.

    Finite floats are truncated.  Strings holding an integer literal are
    parsed.  Anything else returns ``default``.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        s = value.strip()
        if s and (s.isdigit() or (s[0] in {"+", "-"} and s[1:].isdigit())):
            return int(s)
    if value is None:
        return default
    logger.warning("to_int: coercing %r to default %r", value, default)
    return default


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite ``float`` or return ``default``."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        f = float(value)
        if math.isfinite(f):
            return f
    if isinstance(value, str):
        try:
            f = float(value.strip())
        except ValueError:
            logger.warning("to_float: coercing %r to default %r", value, default)
            return default
        if math.isfinite(f):
            return f
    if value is None:
        return default
    logger.warning("to_float: coercing %r to default %r", value, default)
    return default


def to_bool(value: Any, default: bool = False) -> bool:
    """Coerce ``value`` to ``bool``; only real booleans and 0/1 are accepted."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if value is None:
        return default
    logger.warning("to_bool: coercing %r to default %r", value, default)
    return default
