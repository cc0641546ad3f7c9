"""Unlock gates over task levels, coins, age and evil.

A requirement is completed once all of its conditions hold.  Completion is
sticky: after the first success :meth:`Requirement.is_completed` returns
``True`` without looking at the conditions again.  Only the rebirth sweep
clears it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type

from .errors import EntityDataError, MissingEntityError
from .time_model import days_to_years


@dataclass(frozen=True)
class Condition:
    """Threshold to reach; ``task`` is only set for task conditions."""

    requirement: float
    task: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Condition":
        if "requirement" not in data:
            raise EntityDataError(f"condition without threshold: {data!r}")
        return cls(requirement=data["requirement"], task=data.get("task"))


class Requirement:
    type = ""

    def __init__(self, name: str, elements: Sequence[str], conditions: Iterable[Condition]) -> None:
        self.name = name
        self.elements: Tuple[str, ...] = tuple(elements)
        self.conditions: Tuple[Condition, ...] = tuple(conditions)
        self.completed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, completed={self.completed})"

    def is_completed(self, state) -> bool:
        if self.completed:
            return True
        for condition in self.conditions:
            if not self.get_condition(state, condition):
                return False
        self.completed = True
        return True

    def get_condition(self, state, condition: Condition) -> bool:
        raise NotImplementedError


class TaskRequirement(Requirement):
    type = "task"

    def __init__(self, name: str, elements: Sequence[str], conditions: Iterable[Condition]) -> None:
        super().__init__(name, elements, conditions)
        for condition in self.conditions:
            if not condition.task:
                raise EntityDataError(f"{name}: task condition without a task name")

    def get_condition(self, state, condition: Condition) -> bool:
        task = state.task_data.get(condition.task)
        if task is None:
            raise MissingEntityError("task", condition.task)
        return task.level >= condition.requirement


class CoinRequirement(Requirement):
    type = "coins"

    def get_condition(self, state, condition: Condition) -> bool:
        return state.coins >= condition.requirement


class AgeRequirement(Requirement):
    type = "age"

    def get_condition(self, state, condition: Condition) -> bool:
        return days_to_years(state.days) >= condition.requirement


class EvilRequirement(Requirement):
    type = "evil"

    def get_condition(self, state, condition: Condition) -> bool:
        return state.evil >= condition.requirement


REQUIREMENT_TYPES: Dict[str, Type[Requirement]] = {
    cls.type: cls for cls in (TaskRequirement, CoinRequirement, AgeRequirement, EvilRequirement)
}


def build_requirements(
    table: Mapping[str, Tuple[str, Sequence[str], Sequence[Mapping[str, Any]]]],
) -> Dict[str, Requirement]:
    """Create a fresh requirement registry from ``table``."""
    registry: Dict[str, Requirement] = {}
    for name, (kind, elements, conditions) in table.items():
        cls = REQUIREMENT_TYPES.get(kind)
        if cls is None:
            raise EntityDataError(f"{name}: unknown requirement type {kind!r}")
        registry[name] = cls(name, elements, [Condition.from_dict(c) for c in conditions])
    return registry


def referenced_tasks(registry: Mapping[str, Requirement]) -> List[Tuple[str, str]]:
    """Return ``(requirement name, task name)`` for every task condition."""
    refs = []
    for name, req in registry.items():
        if isinstance(req, TaskRequirement):
            refs.extend((name, c.task) for c in req.conditions)
    return refs
