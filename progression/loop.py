"""Tick engine and the fixed-rate scheduler that drives it."""

from __future__ import annotations

from typing import Callable, Optional
import logging
import time

from .data import DEFAULT_PROPERTY, DEFAULT_SKILL
from .entities import Skill, Task, TaskKind
from .numeric import apply_speed
from .state import GameState, next_job

logger = logging.getLogger(__name__)


class GameLoop:
    """Advances a :class:`GameState` one tick at a time.

    Every tick, in order: days advance, auto-promote and auto-learn run, the
    current job earns XP and income, the current skill earns XP, and expenses
    are paid.  Nothing happens while the game is paused.
    """

    def __init__(self, state: GameState) -> None:
        self.state = state
        # Skill auto-learn switches to; refreshed on a slower timer
        self.skill_target: Optional[Skill] = None
        self.ticks_since_skill_update = 0

    @property
    def config(self):
        return self.state.config

    @property
    def skill_update_ticks(self) -> int:
        """Ticks between auto-learn target refreshes."""
        config = self.config
        return max(1, round(config.update_speed * config.skill_update_interval))

    # ------------------------------------------------------------ time & speed
    def get_lifespan(self) -> float:
        state = self.state
        return (self.config.base_lifespan
                * state.task("Immortality").get_effect()
                * state.task("Super immortality").get_effect())

    def is_alive(self) -> bool:
        """Return whether the character is alive; clamps ``days`` on death."""
        lifespan = self.get_lifespan()
        alive = self.state.days < lifespan
        if not alive:
            self.state.days = lifespan
        return alive

    def get_game_speed(self) -> float:
        state = self.state
        warp = state.task("Time warping").get_effect() if state.time_warping_enabled else 1
        return self.config.base_game_speed * (not state.paused) * self.is_alive() * warp

    def apply_speed(self, value: float) -> float:
        return apply_speed(value, self.get_game_speed(), self.config.update_speed)

    def increase_days(self) -> None:
        state = self.state
        state.days += self.apply_speed(1)
        if state.days < 0:
            state.days = 0
        elif state.days > self.config.max_days:
            state.days = self.config.max_days
            logger.warning("age capped at %d years", self.config.max_age_years)

    # -------------------------------------------------------------- automation
    def auto_promote(self) -> None:
        state = self.state
        if not state.auto_promote:
            return
        job = next_job(state)
        if job is None:
            return
        if state.requirement(job.name).is_completed(state):
            logger.info("auto-promoted from %s to %s", state.current_job.name, job.name)
            state.current_job = job

    def select_skill_with_lowest_level(self) -> Skill:
        """Pick the lowest-level unlocked skill that is not skipped.

        Ties go to the skill listed first.  Falls back to Concentration when
        no skill qualifies.
        """
        state = self.state
        best: Optional[Skill] = None
        for skill in state.skills():
            if state.is_skill_skipped(skill.name):
                continue
            if not state.requirement(skill.name).is_completed(state):
                continue
            if best is None or skill.level < best.level:
                best = skill
        if best is None:
            best = state.task(DEFAULT_SKILL)
        self.skill_target = best
        self.ticks_since_skill_update = 0
        return best

    def auto_learn(self) -> None:
        if not self.state.auto_learn:
            return
        if self.skill_target is None or self.ticks_since_skill_update >= self.skill_update_ticks:
            self.select_skill_with_lowest_level()
        self.state.current_skill = self.skill_target

    # ------------------------------------------------------------ task & money
    def do_current_task(self, task: Task) -> None:
        task.increase_xp(self.state, self.get_game_speed())
        if task.kind is TaskKind.JOB:
            self.increase_coins()

    def increase_coins(self) -> None:
        state = self.state
        state.coins += self.apply_speed(state.get_income())
        if state.coins < 0:
            state.coins = 0
        elif state.coins > self.config.max_coins:
            state.coins = self.config.max_coins
            logger.warning("coins capped at %g", self.config.max_coins)

    def apply_expenses(self) -> None:
        state = self.state
        state.coins -= self.apply_speed(state.get_expense())
        if state.coins < 0:
            self.go_bankrupt()

    def go_bankrupt(self) -> None:
        state = self.state
        logger.info("bankrupt: dropping %s and %d misc items",
                    state.current_property.name, len(state.current_misc))
        state.coins = 0
        state.current_property = state.item(DEFAULT_PROPERTY)
        state.current_misc = []

    def tick(self) -> bool:
        """Run one tick.  Returns ``False`` if the game was paused."""
        state = self.state
        if state.paused:
            return False
        self.increase_days()
        self.auto_promote()
        self.auto_learn()
        self.do_current_task(state.current_job)
        self.do_current_task(state.current_skill)
        self.apply_expenses()
        self.ticks_since_skill_update += 1
        logger.debug("tick: day=%.2f coins=%.2f speed=%.3f",
                     state.days, state.coins, self.get_game_speed())
        return True

    def advance(self, ticks: int) -> int:
        """Run ``ticks`` ticks back to back; return how many were not paused."""
        ran = 0
        for _ in range(ticks):
            if self.tick():
                ran += 1
        return ran


class Scheduler:
    """Fixed-rate driver for a :class:`GameLoop`.

    Three timers run off one clock: the tick at ``update_speed`` Hz, the
    autosave every ``save_interval`` seconds and the auto-learn refresh every
    ``skill_update_interval`` seconds.  Missed intervals are dropped rather
    than replayed.  ``clock`` and ``sleep`` can be replaced for testing.
    """

    def __init__(
        self,
        loop: GameLoop,
        save: Optional[Callable[[GameState], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.loop = loop
        self.save = save
        self.clock = clock
        self.sleep = sleep
        config = loop.config
        now = clock()
        self.tick_interval = config.tick_seconds
        self.next_tick = now + self.tick_interval
        self.next_save = now + config.save_interval
        self.next_skill_update = now + config.skill_update_interval
        self.ticks = 0
        self.saves = 0

    @staticmethod
    def _reschedule(due: float, interval: float, now: float) -> float:
        due += interval
        if due <= now:
            due = now + interval
        return due

    def _autosave(self) -> None:
        if self.save is None:
            return
        try:
            self.save(self.loop.state)
        except OSError as exc:
            logger.warning("autosave failed: %s", exc)
            return
        self.saves += 1

    def pump(self) -> None:
        """Run every timer that is due at the current clock reading."""
        config = self.loop.config
        now = self.clock()
        if now >= self.next_skill_update:
            self.loop.select_skill_with_lowest_level()
            self.next_skill_update = self._reschedule(
                self.next_skill_update, config.skill_update_interval, now)
        if now >= self.next_tick:
            self.loop.tick()
            self.ticks += 1
            self.next_tick = self._reschedule(self.next_tick, self.tick_interval, now)
        if now >= self.next_save:
            self._autosave()
            self.next_save = self._reschedule(self.next_save, config.save_interval, now)

    def next_due(self) -> float:
        return min(self.next_tick, self.next_save, self.next_skill_update)

    def run_for(self, seconds: float) -> None:
        end = self.clock() + seconds
        while True:
            self.pump()
            now = self.clock()
            if now >= end:
                break
            self.sleep(max(0.0, min(self.next_due(), end) - now))
