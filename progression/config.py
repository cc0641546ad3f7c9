"""Tunable game constants and balance file loading.

All timing, lifespan and cap values live on a single :class:`GameConfig`
instance, :data:`CONFIG`.  The engine reads from it at call time so values
replaced by :func:`load_balance` take effect immediately.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple
import json
import logging
import os

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Central store for values that drive the progression engine."""

    # Ticks per second of the main loop
    update_speed: int = 20
    # Days of life before any lifespan skill
    base_lifespan: float = 365 * 70
    # Days advanced per second before pause/death/time warping
    base_game_speed: float = 4

    # Scheduler intervals in seconds
    save_interval: float = 3.0
    skill_update_interval: float = 1.0

    # Starting values for a new life
    initial_days: float = 365 * 14
    initial_coins: float = 0
    initial_evil: float = 0

    # Requirements that stay unlocked across rebirths once completed
    permanent_unlocks: Tuple[str, ...] = (
        "Scheduling", "Shop", "Automation", "Quick task display",
    )

    # Caps for clamping and for validating imported saves
    max_level: int = 1000
    max_xp: float = 1e12
    max_coins: float = 1e12
    max_age_years: int = 1000
    max_evil: float = 1e6

    # Task names from retired naming schemes; saves using them are discarded
    deprecated_task_names: Tuple[str, ...] = ("Scanning",)

    # Key under which the whole game is stored
    storage_key: str = "gameDataSave"
    save_version: int = 1

    @property
    def tick_seconds(self) -> float:
        return 1.0 / self.update_speed

    @property
    def max_days(self) -> float:
        return self.max_age_years * 365


CONFIG = GameConfig()

_TUPLE_FIELDS = {"permanent_unlocks", "deprecated_task_names"}


def _balance_path(default_path: Optional[str] = None) -> str:
    """Return path to the balance override file."""

    if default_path is not None:
        return default_path
    return os.path.join(os.path.dirname(__file__), "balance", "game.json")


def load_balance(path: Optional[str] = None, config: GameConfig = CONFIG) -> GameConfig:
    """Overlay values from a JSON balance file onto ``config``.

    The file maps :class:`GameConfig` field names to values.  A missing file
    leaves ``config`` untouched.  Unknown keys and values of the wrong shape
    are skipped with a warning.
    """

    fn = _balance_path(path)
    try:
        with open(fn, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return config

    if not isinstance(data, dict):
        logger.warning("balance file %s is not an object; ignoring", fn)
        return config

    known = {f.name: f for f in fields(config)}
    for key, value in data.items():
        if key not in known:
            logger.warning("unknown balance key %r in %s", key, fn)
            continue
        current = getattr(config, key)
        if key in _TUPLE_FIELDS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                logger.warning("balance key %r must be a list of names", key)
                continue
            setattr(config, key, tuple(value))
        elif isinstance(current, bool) or isinstance(value, bool):
            continue
        elif isinstance(current, (int, float)) and isinstance(value, (int, float)):
            setattr(config, key, type(current)(value))
        elif isinstance(current, str) and isinstance(value, str):
            setattr(config, key, value)
        else:
            logger.warning("balance key %r has unexpected value %r", key, value)
    return config


# Load balance at import time so callers get configured defaults.
load_balance()


__all__ = ["GameConfig", "CONFIG", "load_balance"]
