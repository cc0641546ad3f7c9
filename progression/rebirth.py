"""Prestige resets.

``rebirth_one`` banks each task's best level into ``max_level``.
``rebirth_two`` converts progress into evil and then wipes the bank.  Both
always succeed; checking whether the player may rebirth yet is the caller's
job.
"""

from __future__ import annotations

import logging

from .state import GameState, relock_requirements, reset_pointers

logger = logging.getLogger(__name__)


def get_evil_gain(state: GameState) -> float:
    return state.task("Evil control").get_effect() * state.task("Blood meditation").get_effect()


def rebirth_reset(state: GameState) -> None:
    config = state.config
    state.coins = 0
    state.days = config.initial_days
    reset_pointers(state)

    for task in state.task_data.values():
        if task.level > task.max_level:
            task.max_level = task.level
        task.level = 0
        task.xp = 0

    relock_requirements(state)


def rebirth_one(state: GameState) -> None:
    state.rebirth_one_count += 1
    rebirth_reset(state)
    logger.info("rebirth one (#%d)", state.rebirth_one_count)


def rebirth_two(state: GameState) -> float:
    """Embrace evil.  Returns the evil gained."""
    state.rebirth_two_count += 1
    gain = get_evil_gain(state)
    state.evil += gain
    rebirth_reset(state)
    for task in state.task_data.values():
        task.max_level = 0
    logger.info("rebirth two (#%d): +%g evil, now %g", state.rebirth_two_count, gain, state.evil)
    return gain
