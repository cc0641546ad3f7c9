"""The game state aggregate, bootstrap and player action handlers.

A :class:`GameState` is created once by :func:`new_game` and handed to the
tick engine, the persistence layer and the UI.  The UI only reads from it or
calls the ``set_*`` handlers below; it never assigns entity fields directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set
import logging

from .config import CONFIG, GameConfig
from .data import (
    CATEGORY_INDEX,
    DEFAULT_JOB,
    DEFAULT_PROPERTY,
    DEFAULT_SKILL,
    ITEM_BASE_DATA,
    ITEM_CATEGORIES,
    JOB_BASE_DATA,
    JOB_CATEGORIES,
    REQUIREMENT_TABLE,
    SKILL_BASE_DATA,
    SKILL_CATEGORIES,
)
from .entities import Item, ItemKind, Job, Skill, Task, TaskKind
from .errors import MissingEntityError
from .multipliers import add_multipliers, evaluate_chain
from .requirements import Requirement, build_requirements, referenced_tasks

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class GameState:
    task_data: Dict[str, Task]
    item_data: Dict[str, Item]
    requirements: Dict[str, Requirement]
    current_job: Job
    current_skill: Skill
    current_property: Item
    current_misc: List[Item] = field(default_factory=list)

    coins: float = 0
    days: float = 365 * 14
    evil: float = 0
    paused: bool = False
    time_warping_enabled: bool = True
    rebirth_one_count: int = 0
    rebirth_two_count: int = 0

    auto_promote: bool = False
    auto_learn: bool = False
    skipped_skills: Set[str] = field(default_factory=set)

    # Set while a narrative choice is pending; blocks unpausing.  Not saved.
    pause_locked: bool = False
    config: GameConfig = field(default_factory=lambda: CONFIG)

    # ------------------------------------------------------------------ lookups
    def task(self, name: str) -> Task:
        try:
            return self.task_data[name]
        except KeyError:
            raise MissingEntityError("task", name) from None

    def item(self, name: str) -> Item:
        try:
            return self.item_data[name]
        except KeyError:
            raise MissingEntityError("item", name) from None

    def requirement(self, name: str) -> Requirement:
        try:
            return self.requirements[name]
        except KeyError:
            raise MissingEntityError("requirement", name) from None

    def jobs(self) -> List[Job]:
        return [t for t in self.task_data.values() if t.kind is TaskKind.JOB]

    def skills(self) -> List[Skill]:
        return [t for t in self.task_data.values() if t.kind is TaskKind.SKILL]

    def is_unlocked(self, name: str) -> bool:
        return self.requirement(name).is_completed(self)

    def multiplier_values(self, chain) -> List[float]:
        return evaluate_chain(self, chain)

    # ---------------------------------------------------------------- aggregates
    def get_happiness(self) -> float:
        return (self.task("Meditation").get_effect()
                * self.item("Butler").get_effect(self)
                * self.current_property.get_effect(self))

    def get_income(self) -> float:
        return self.current_job.get_income(self)

    def get_expense(self) -> float:
        expense = self.current_property.get_expense(self)
        for misc in self.current_misc:
            expense += misc.get_expense(self)
        return expense

    def get_net(self) -> float:
        return abs(self.get_income() - self.get_expense())

    def requirement_visibility(self) -> Dict[str, bool]:
        """Map each UI element handle to whether it should be shown."""
        visible: Dict[str, bool] = {}
        for req in self.requirements.values():
            completed = req.is_completed(self)
            for element in req.elements:
                visible[element] = completed
        return visible

    # ------------------------------------------------------------------ actions
    def set_task(self, name: str) -> None:
        task = self.task(name)
        if task.kind is TaskKind.JOB:
            self.current_job = task
        else:
            self.current_skill = task

    def set_property(self, name: str) -> None:
        prop = self.item(name)
        if prop.kind is not ItemKind.PROPERTY:
            raise ValueError(f"{name!r} is not a property")
        self.current_property = prop

    def set_misc(self, name: str) -> None:
        """Toggle ``name`` in the current misc set."""
        misc = self.item(name)
        if misc.kind is not ItemKind.MISC:
            raise ValueError(f"{name!r} is not a misc item")
        if misc in self.current_misc:
            self.current_misc.remove(misc)
        else:
            self.current_misc.append(misc)

    def set_pause(self) -> bool:
        """Toggle pause.  Returns ``False`` if unpausing is currently locked."""
        if self.paused and self.pause_locked:
            logger.info("cannot unpause while an adventure is active")
            return False
        self.paused = not self.paused
        return True

    def set_time_warping(self) -> None:
        self.time_warping_enabled = not self.time_warping_enabled

    def set_auto_promote(self, enabled: bool) -> None:
        self.auto_promote = bool(enabled)

    def set_auto_learn(self, enabled: bool) -> None:
        self.auto_learn = bool(enabled)

    def toggle_skill_skipped(self, name: str) -> bool:
        """Flip whether auto-learn ignores ``name``; return the new flag."""
        if self.task(name).kind is not TaskKind.SKILL:
            raise ValueError(f"{name!r} is not a skill")
        if name in self.skipped_skills:
            self.skipped_skills.discard(name)
            return False
        self.skipped_skills.add(name)
        return True

    def is_skill_skipped(self, name: str) -> bool:
        return name in self.skipped_skills


def _build_tasks() -> Dict[str, Task]:
    tasks: Dict[str, Task] = {}
    for names in JOB_CATEGORIES.values():
        for name in names:
            tasks[name] = Job(JOB_BASE_DATA[name])
    for names in SKILL_CATEGORIES.values():
        for name in names:
            tasks[name] = Skill(SKILL_BASE_DATA[name])
    return tasks


def _build_items() -> Dict[str, Item]:
    return {name: Item(ITEM_BASE_DATA[name])
            for names in ITEM_CATEGORIES.values() for name in names}


def new_game(config: Optional[GameConfig] = None) -> GameState:
    """Build a fresh game from the base data tables."""
    config = config or CONFIG
    tasks = _build_tasks()
    items = _build_items()
    requirements = build_requirements(REQUIREMENT_TABLE)
    for req_name, task_name in referenced_tasks(requirements):
        if task_name not in tasks:
            raise MissingEntityError("task", f"{task_name} (required by {req_name})")

    state = GameState(
        task_data=tasks,
        item_data=items,
        requirements=requirements,
        current_job=tasks[DEFAULT_JOB],
        current_skill=tasks[DEFAULT_SKILL],
        current_property=items[DEFAULT_PROPERTY],
        coins=config.initial_coins,
        days=config.initial_days,
        evil=config.initial_evil,
        config=config,
    )
    add_multipliers(state)
    logger.info("new game: %d tasks, %d items, %d requirements",
                len(tasks), len(items), len(requirements))
    return state


def relock_requirements(state: GameState) -> None:
    """Clear completion on every requirement except completed permanent ones."""
    permanent = set(state.config.permanent_unlocks)
    for name, req in state.requirements.items():
        if req.completed and name in permanent:
            continue
        req.completed = False


def reset_pointers(state: GameState) -> None:
    state.current_job = state.task(DEFAULT_JOB)
    state.current_skill = state.task(DEFAULT_SKILL)
    state.current_property = state.item(DEFAULT_PROPERTY)
    state.current_misc = []


def reset_game_state(state: GameState) -> None:
    """Hard reset: scalars, pointers, levels and XP back to a new game."""
    config = state.config
    state.coins = config.initial_coins
    state.days = config.initial_days
    state.evil = config.initial_evil
    state.paused = False
    state.time_warping_enabled = True
    state.rebirth_one_count = 0
    state.rebirth_two_count = 0
    reset_pointers(state)
    for task in state.task_data.values():
        task.level = 0
        task.xp = 0
        task.max_level = 0
    relock_requirements(state)
    logger.warning("game state reset to defaults")


def next_job(state: GameState) -> Optional[Job]:
    """Return the job after the current one in its category, if any."""
    name = CATEGORY_INDEX.next_in_category(state.current_job.name)
    if name is None:
        return None
    return state.task(name)
