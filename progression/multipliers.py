"""Multiplier descriptors and the wiring step that attaches them.

A chain is a list of :class:`MultiplierSource` values.  Each one names where
its factor comes from and is resolved against the live
:class:`~progression.state.GameState` every time the chain is folded, so
chains hold no references to other entities and survive save/load as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional
import logging

from .data import ARCANE_ASSOCIATION, CATEGORY_INDEX, DARK_MAGIC, MAGIC, MILITARY
from .entities import TaskKind

logger = logging.getLogger(__name__)


class MultiplierKind(Enum):
    SKILL_EFFECT = "SkillEffect"
    ITEM_EFFECT = "ItemEffect"
    MAX_LEVEL = "MaxLevel"
    JOB_LEVEL = "JobLevel"
    HAPPINESS = "Happiness"
    EVIL = "Evil"


@dataclass(frozen=True)
class MultiplierSource:
    kind: MultiplierKind
    name: Optional[str] = None

    def __str__(self) -> str:
        if self.name is None:
            return self.kind.value
        return f"{self.kind.value}({self.name})"

    def evaluate(self, state) -> float:
        kind = self.kind
        if kind is MultiplierKind.SKILL_EFFECT:
            return state.task(self.name).get_effect()
        if kind is MultiplierKind.ITEM_EFFECT:
            return state.item(self.name).get_effect(state)
        if kind is MultiplierKind.MAX_LEVEL:
            return state.task(self.name).get_max_level_multiplier()
        if kind is MultiplierKind.JOB_LEVEL:
            return state.task(self.name).get_level_multiplier()
        if kind is MultiplierKind.HAPPINESS:
            return state.get_happiness()
        if kind is MultiplierKind.EVIL:
            return state.evil
        raise ValueError(f"unhandled multiplier kind {kind!r}")


def skill(name: str) -> MultiplierSource:
    return MultiplierSource(MultiplierKind.SKILL_EFFECT, name)


def item(name: str) -> MultiplierSource:
    return MultiplierSource(MultiplierKind.ITEM_EFFECT, name)


HAPPINESS = MultiplierSource(MultiplierKind.HAPPINESS)
EVIL = MultiplierSource(MultiplierKind.EVIL)


def evaluate_chain(state, chain: Iterable[MultiplierSource]) -> List[float]:
    """Resolve every source in ``chain`` to its current factor."""
    return [source.evaluate(state) for source in chain]


def xp_chain(task) -> List[MultiplierSource]:
    chain = [
        MultiplierSource(MultiplierKind.MAX_LEVEL, task.name),
        HAPPINESS,
        skill("Dark influence"),
        skill("Demon training"),
    ]
    if task.kind is TaskKind.JOB:
        chain += [skill("Productivity"), item("Personal squire")]
    else:
        chain += [skill("Concentration"), item("Book"), item("Study desk"), item("Library")]

    category = CATEGORY_INDEX.category_of(task.name)
    if category == MILITARY:
        chain += [skill("Battle tactics"), item("Steel longsword")]
    elif task.name == "Strength":
        chain += [skill("Muscle memory"), item("Dumbbells")]
    elif category == MAGIC:
        chain.append(item("Sapphire charm"))
    elif category == ARCANE_ASSOCIATION:
        chain.append(skill("Mana control"))
    elif category == DARK_MAGIC:
        chain.append(EVIL)
    return chain


def income_chain(job) -> List[MultiplierSource]:
    chain = [MultiplierSource(MultiplierKind.JOB_LEVEL, job.name), skill("Demon's wealth")]
    if CATEGORY_INDEX.in_category(job.name, MILITARY):
        chain.append(skill("Strength"))
    return chain


EXPENSE_CHAIN = (skill("Bargaining"), skill("Intimidation"))


def add_multipliers(state) -> None:
    """(Re)build every multiplier chain on ``state``.

    Chains are replaced rather than appended to, so calling this again after a
    load leaves the same chains in place.
    """
    for task in state.task_data.values():
        task.xp_multipliers = xp_chain(task)
        if task.kind is TaskKind.JOB:
            task.income_multipliers = income_chain(task)
    for entry in state.item_data.values():
        entry.expense_multipliers = list(EXPENSE_CHAIN)
    logger.debug("wired multipliers for %d tasks and %d items",
                 len(state.task_data), len(state.item_data))
