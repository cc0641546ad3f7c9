"""Tasks (jobs and skills) and items.

Entities only hold their own numbers.  Anything that depends on the rest of
the game (multiplier chains, the current property, the current misc set) is
read from the :class:`~progression.state.GameState` passed in by the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging
import math

from .config import CONFIG, GameConfig
from .data import CATEGORY_INDEX, PROPERTIES
from .errors import EntityDataError
from .numeric import apply_multipliers, apply_speed, format_effect, get_base_log, round_half_up

logger = logging.getLogger(__name__)

# Base XP earned per day before any multiplier
BASE_XP_GAIN = 10


class TaskKind(Enum):
    JOB = "job"
    SKILL = "skill"


class ItemKind(Enum):
    PROPERTY = "property"
    MISC = "misc"


def _field(base_data: Mapping[str, Any], key: str, owner: str) -> Any:
    if key not in base_data:
        raise EntityDataError(f"{owner}: missing required field {key!r}")
    return base_data[key]


def _number(base_data: Mapping[str, Any], key: str, owner: str) -> float:
    value = _field(base_data, key, owner)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise EntityDataError(f"{owner}: field {key!r} must be a finite number, got {value!r}")
    return value


def _name(base_data: Mapping[str, Any]) -> str:
    name = base_data.get("name") if isinstance(base_data, Mapping) else None
    if not isinstance(name, str) or not name:
        raise EntityDataError(f"entity base data has no usable name: {base_data!r}")
    return name


class Task:
    """Common level/XP bookkeeping for jobs and skills."""

    kind: TaskKind

    def __init__(self, base_data: Mapping[str, Any]) -> None:
        self.name = _name(base_data)
        self.max_xp = _number(base_data, "maxXp", self.name)
        if self.max_xp <= 0:
            raise EntityDataError(f"{self.name}: maxXp must be positive, got {self.max_xp!r}")
        self.base_data = dict(base_data)
        self.level = 0
        self.max_level = 0
        self.xp = 0.0
        self.xp_multipliers: List = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, level={self.level}, xp={self.xp:g})"

    def get_max_xp(self) -> float:
        return round_half_up(self.max_xp * (self.level + 1) * math.pow(1.01, self.level))

    def get_xp_left(self) -> float:
        return round_half_up(self.get_max_xp() - self.xp)

    def get_max_level_multiplier(self) -> float:
        return 1 + self.max_level / 10

    def get_xp_gain(self, state) -> float:
        return apply_multipliers(BASE_XP_GAIN, state.multiplier_values(self.xp_multipliers))

    def add_xp(self, amount: float, config: Optional[GameConfig] = None) -> None:
        """Add ``amount`` XP and resolve every level-up it pays for.

        Invalid or negative amounts are skipped with a warning.  Levels stop
        at ``config.max_level``; below that cap ``0 <= xp < get_max_xp()``
        holds after the call.
        """
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) \
                or not math.isfinite(amount) or amount < 0:
            logger.warning("skipping invalid xp gain %r for %s", amount, self.name)
            return
        config = config or CONFIG
        self.clamp(config)
        self.xp += amount
        max_xp = self.get_max_xp()
        while self.xp >= max_xp and self.level < config.max_level:
            self.xp -= max_xp
            self.level += 1
            max_xp = self.get_max_xp()
        self.clamp(config)

    def clamp(self, config: Optional[GameConfig] = None) -> None:
        """Pull level, max level and XP back inside the configured caps."""
        config = config or CONFIG
        if not 0 <= self.level <= config.max_level:
            logger.warning("%s level %r out of range, clamping", self.name, self.level)
            self.level = max(0, min(config.max_level, self.level))
        if not 0 <= self.max_level <= config.max_level:
            logger.warning("%s max level %r out of range, clamping", self.name, self.max_level)
            self.max_level = max(0, min(config.max_level, self.max_level))
        if not 0 <= self.xp <= config.max_xp:
            logger.warning("%s xp %r out of range, clamping", self.name, self.xp)
            self.xp = max(0, min(config.max_xp, self.xp))

    def increase_xp(self, state, game_speed: float) -> None:
        gain = apply_speed(self.get_xp_gain(state), game_speed, state.config.update_speed)
        self.add_xp(gain, state.config)

    def to_dict(self) -> Dict[str, float]:
        return {"level": self.level, "xp": self.xp, "maxLevel": self.max_level}


class Job(Task):
    kind = TaskKind.JOB

    def __init__(self, base_data: Mapping[str, Any]) -> None:
        super().__init__(base_data)
        self.income = _number(base_data, "income", self.name)
        if self.income < 0:
            raise EntityDataError(f"{self.name}: income must not be negative")
        self.income_multipliers: List = []

    def get_level_multiplier(self) -> float:
        return 1 + math.log10(self.level + 1)

    def get_income(self, state) -> float:
        return apply_multipliers(self.income, state.multiplier_values(self.income_multipliers))


def _expense_reduction(level: int) -> float:
    return max(1 - get_base_log(7, level + 1) / 10, 0.1)


def _log_bonus(base: float) -> Callable[[int], float]:
    def effect(level: int) -> float:
        return 1 + get_base_log(base, level + 1)
    return effect


# Skills whose effect does not follow the linear per-level formula
SKILL_EFFECT_OVERRIDES: Dict[str, Callable[[int], float]] = {
    "Bargaining": _expense_reduction,
    "Intimidation": _expense_reduction,
    "Time warping": _log_bonus(13),
    "Immortality": _log_bonus(33),
}


class Skill(Task):
    kind = TaskKind.SKILL

    def __init__(self, base_data: Mapping[str, Any]) -> None:
        super().__init__(base_data)
        self.effect = _number(base_data, "effect", self.name)
        self.description = _field(base_data, "description", self.name)

    def get_effect(self) -> float:
        override = SKILL_EFFECT_OVERRIDES.get(self.name)
        if override is not None:
            return override(self.level)
        return 1 + self.effect * self.level

    def get_effect_description(self) -> str:
        return f"{format_effect(self.get_effect(), 2)} {self.description}"


class Item:
    """Purchasable modifier.  Its effect only applies while it is in use."""

    def __init__(self, base_data: Mapping[str, Any]) -> None:
        self.name = _name(base_data)
        self.expense = _number(base_data, "expense", self.name)
        self.effect = _number(base_data, "effect", self.name)
        if self.expense < 0:
            raise EntityDataError(f"{self.name}: expense must not be negative")
        self.description = base_data.get("description", "")
        self.base_data = dict(base_data)
        self.kind = ItemKind.PROPERTY if CATEGORY_INDEX.in_category(self.name, PROPERTIES) else ItemKind.MISC
        self.expense_multipliers: List = []

    def __repr__(self) -> str:
        return f"Item({self.name!r}, kind={self.kind.value})"

    def is_active(self, state) -> bool:
        return state.current_property is self or self in state.current_misc

    def get_effect(self, state) -> float:
        if self.is_active(state):
            return self.effect
        return 1

    def get_expense(self, state) -> float:
        return apply_multipliers(self.expense, state.multiplier_values(self.expense_multipliers))

    def get_effect_description(self) -> str:
        label = "Happiness" if self.kind is ItemKind.PROPERTY else self.description
        return f"{format_effect(self.effect, 1)} {label}"


def create_task(base_data: Mapping[str, Any], kind: TaskKind) -> Task:
    """Build a job or skill from its base data."""
    if kind is TaskKind.JOB:
        return Job(base_data)
    return Skill(base_data)
