"""Incremental-game progression engine: tasks, items, unlocks and rebirths."""

from .config import CONFIG, GameConfig, load_balance
from .errors import (
    DeprecatedSaveError,
    EntityDataError,
    MissingEntityError,
    ProgressionError,
    SaveCorruptError,
)
from .loop import GameLoop, Scheduler
from .rebirth import get_evil_gain, rebirth_one, rebirth_two
from .state import GameState, new_game, reset_game_state

__all__ = [
    "CONFIG",
    "GameConfig",
    "load_balance",
    "ProgressionError",
    "EntityDataError",
    "MissingEntityError",
    "SaveCorruptError",
    "DeprecatedSaveError",
    "GameLoop",
    "Scheduler",
    "GameState",
    "new_game",
    "reset_game_state",
    "rebirth_one",
    "rebirth_two",
    "get_evil_gain",
]
