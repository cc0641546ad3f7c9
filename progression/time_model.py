"""Day/year conversions for the character's age.

The game counts age in days with a flat 365-day year and no calendar.
"""
from __future__ import annotations

import math

DAYS_PER_YEAR = 365


def days_to_years(days: float) -> int:
    """Return completed years for an age of ``days``."""
    return int(math.floor(days / DAYS_PER_YEAR))


def years_to_days(years: float) -> float:
    return years * DAYS_PER_YEAR


def day_of_year(days: float) -> int:
    """Return the day within the current year of life."""
    return int(math.floor(days - days_to_years(days) * DAYS_PER_YEAR))
