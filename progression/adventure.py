"""Boundary between the progression core and the narrative adventure layer.

The narrative side reads a plain snapshot from :func:`encode_character_state`
and reports choice outcomes to an :class:`AdventureManager`.  The manager is
the only thing that pauses the game for an adventure and the only thing that
hands out adventure rewards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging
import math

from .state import GameState
from .time_model import days_to_years

logger = logging.getLogger(__name__)

CHOICE_SKILLS: Dict[str, str] = {
    "aggressive": "Strength",
    "diplomatic": "Meditation",
    "cautious": "Concentration",
    "creative": "Mana control",
}

MAX_FAILURES = 3
MIN_BASE_XP = 500
MAX_BASE_XP = 5000
BADGE = "Adventurer's Badge"


def encode_character_state(state: GameState, engine) -> Dict[str, Any]:
    """Return a JSON-ready snapshot of the character for prompt building."""
    return {
        "age": days_to_years(state.days),
        "days": state.days,
        "coins": state.coins,
        "evil": state.evil,
        "currentJob": state.current_job.name,
        "currentSkill": state.current_skill.name,
        "currentProperty": state.current_property.name,
        "skills": [
            {"name": s.name, "level": s.level, "effect": s.get_effect(), "description": s.description}
            for s in state.skills()
        ],
        "jobs": [
            {"name": j.name, "level": j.level, "income": j.get_income(state), "maxLevel": j.max_level}
            for j in state.jobs()
        ],
        "items": [
            {"name": i.name, "expense": i.get_expense(state), "active": i.is_active(state)}
            for i in state.item_data.values()
        ],
        "rebirthCount": state.rebirth_one_count + state.rebirth_two_count,
        "isAlive": engine.is_alive(),
        "lifespan": engine.get_lifespan(),
    }


@dataclass
class AdventureRewards:
    skill_xp: Dict[str, int] = field(default_factory=dict)
    bonus_multiplier: float = 1.0
    reward_multiplier: float = 1.0
    days_advanced: int = 0
    unlocks: List[str] = field(default_factory=list)


class AdventureManager:
    def __init__(self, state: GameState) -> None:
        self.state = state
        self.active = False
        self.unlocks: List[str] = []
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.success_count = 0
        self.failure_count = 0
        self.turn_count = 0
        self.choice_types = {choice: 0 for choice in CHOICE_SKILLS}

    def start_adventure(self) -> None:
        if self.active:
            raise RuntimeError("adventure already in progress")
        self._reset_counters()
        self.active = True
        self.state.paused = True
        self.state.pause_locked = True
        logger.info("adventure started; game paused")

    def can_unpause_game(self) -> bool:
        return not self.active

    def track_choice_result(self, success: bool, choice_type: str) -> None:
        if choice_type not in CHOICE_SKILLS:
            raise ValueError(f"unknown choice type {choice_type!r}")
        self.turn_count += 1
        if success:
            self.success_count += 1
        else:
            self.failure_count += 1
        self.choice_types[choice_type] += 1

    def should_auto_end(self) -> bool:
        return self.failure_count >= MAX_FAILURES

    def get_success_rate(self) -> float:
        if self.turn_count == 0:
            return 0.0
        return self.success_count / self.turn_count

    def calculate_base_xp(self) -> int:
        levels = [t.level for t in self.state.task_data.values() if t.level > 0]
        if not levels:
            return MIN_BASE_XP
        base = MIN_BASE_XP + math.floor(sum(levels) / len(levels) * 15)
        return min(MAX_BASE_XP, max(MIN_BASE_XP, base))

    def calculate_rewards(self, manual_end: bool = False) -> AdventureRewards:
        rewards = AdventureRewards()
        base_xp = self.calculate_base_xp()
        rate = self.get_success_rate()
        xp = {choice: math.floor(count * base_xp * rate) for choice, count in self.choice_types.items()}

        if rate > 0.75 and self.success_count >= 5:
            rewards.bonus_multiplier = 2.0
            xp = {k: math.floor(v * 2.0) for k, v in xp.items()}
        if rate > 0.90 and self.success_count >= 10:
            rewards.bonus_multiplier = 3.0
            xp = {k: math.floor(v * 1.5) for k, v in xp.items()}

        if self.turn_count >= 10:
            rewards.days_advanced = math.floor(self.turn_count * 0.1)
        if self.success_count >= 15:
            rewards.unlocks.append(BADGE)

        if manual_end and self.turn_count < 5:
            rewards.reward_multiplier = 0.9
            xp = {k: math.floor(v * 0.9) for k, v in xp.items()}

        rewards.skill_xp = {CHOICE_SKILLS[k]: v for k, v in xp.items()}
        return rewards

    def _apply_rewards(self, rewards: AdventureRewards) -> None:
        state = self.state
        for name, amount in rewards.skill_xp.items():
            if amount > 0:
                state.task(name).add_xp(amount, state.config)
        if rewards.days_advanced:
            state.days = min(state.days + rewards.days_advanced, state.config.max_days)
        for unlock in rewards.unlocks:
            if unlock not in self.unlocks:
                self.unlocks.append(unlock)

    def end_adventure(self, manual_end: bool = False) -> Dict[str, Any]:
        """Apply rewards, unpause the game and return a summary."""
        rewards = self.calculate_rewards(manual_end)
        summary = {
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "successRate": self.get_success_rate(),
            "turnCount": self.turn_count,
            "choiceTypes": dict(self.choice_types),
            "rewards": rewards,
        }
        if not self.active:
            return summary

        self._apply_rewards(rewards)
        self._reset_counters()
        self.active = False
        self.state.pause_locked = False
        self.state.paused = False
        logger.info("adventure ended: %d/%d successes", summary["successCount"], summary["turnCount"])
        return summary
