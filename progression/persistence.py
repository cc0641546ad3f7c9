"""Save/load of the game state.

The save document only carries mutable numbers and names.  Loading always
starts from a fresh :func:`~progression.state.new_game` and overlays what the
save provides, so entity behaviour and multiplier chains come from code,
never from the blob.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
import base64
import binascii
import json
import logging
import os

from .config import CONFIG, GameConfig
from .data import DEFAULT_JOB, DEFAULT_PROPERTY, DEFAULT_SKILL
from .entities import ItemKind, TaskKind
from .errors import DeprecatedSaveError, ProgressionError, SaveCorruptError
from .loop import GameLoop
from .safe_parse import to_bool, to_float, to_int
from .state import GameState, new_game
from .time_model import days_to_years

logger = logging.getLogger(__name__)

# Characters younger than this cannot legitimately be dead
MIN_DEATH_AGE_YEARS = 20

# =============================== STORAGE ======================================


class KeyValueStorage:
    """Minimal string key-value store, shaped like the browser's localStorage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage(KeyValueStorage):
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp = path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp, path)

    def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


class BrowserStorage(KeyValueStorage):
    """Adapter over a JavaScript ``Storage`` object."""

    def __init__(self, js_storage: Any) -> None:
        self.js_storage = js_storage

    def get_item(self, key: str) -> Optional[str]:
        return self.js_storage.getItem(key)

    def set_item(self, key: str, value: str) -> None:
        self.js_storage.setItem(key, value)

    def remove_item(self, key: str) -> None:
        self.js_storage.removeItem(key)


def browser_storage() -> BrowserStorage:
    """Return the page's ``localStorage``; only available under Pyodide."""
    try:
        import js  # provided by the Pyodide runtime
    except ImportError:
        raise ProgressionError("browser storage needs the Pyodide runtime") from None
    return BrowserStorage(js.localStorage)


# ============================== SERIALIZATION =================================


def to_dict(state: GameState) -> Dict[str, Any]:
    """Return the JSON-ready save document for ``state``."""
    return {
        "version": state.config.save_version,
        "taskData": {name: task.to_dict() for name, task in state.task_data.items()},
        "itemData": {name: {} for name in state.item_data},
        "requirements": {
            name: {"type": req.type, "completed": req.completed}
            for name, req in state.requirements.items()
        },
        "coins": state.coins,
        "days": state.days,
        "evil": state.evil,
        "paused": state.paused,
        "timeWarpingEnabled": state.time_warping_enabled,
        "rebirthOneCount": state.rebirth_one_count,
        "rebirthTwoCount": state.rebirth_two_count,
        "currentJob": state.current_job.name,
        "currentSkill": state.current_skill.name,
        "currentProperty": state.current_property.name,
        "currentMisc": [m.name for m in state.current_misc],
        "autoPromote": state.auto_promote,
        "autoLearn": state.auto_learn,
        "skippedSkills": sorted(state.skipped_skills),
    }


def _pointer_name(value: Any) -> Optional[str]:
    """Accept a pointer saved as a name or as an ``{"name": ...}`` object."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and isinstance(value.get("name"), str):
        return value["name"]
    return None


def is_valid_game_data(data: Any) -> bool:
    """Cheap structural check run before any field is trusted."""
    if not isinstance(data, Mapping):
        return False
    for key in ("taskData", "itemData", "requirements", "coins", "days", "evil"):
        if key not in data:
            return False
    tasks = data["taskData"]
    items = data["itemData"]
    if not isinstance(tasks, Mapping) or not isinstance(items, Mapping):
        return False
    if not isinstance(data["requirements"], Mapping):
        return False
    for key in ("currentJob", "currentSkill"):
        name = _pointer_name(data.get(key))
        if name is None or name not in tasks:
            return False
    if data.get("currentProperty") is not None:
        name = _pointer_name(data["currentProperty"])
        if name is None or name not in items:
            return False
    return True


def validate_ranges(data: Mapping[str, Any], config: GameConfig = CONFIG) -> List[str]:
    """Return a list of problems with out-of-range values in ``data``."""
    problems: List[str] = []

    def check(label: str, value: Any, high: float) -> None:
        number = to_float(value, default=float("nan"))
        if not 0 <= number <= high:
            problems.append(f"{label}={value!r} outside [0, {high:g}]")

    check("coins", data.get("coins"), config.max_coins)
    check("days", data.get("days"), config.max_days)
    check("evil", data.get("evil"), config.max_evil)
    tasks = data.get("taskData")
    if isinstance(tasks, Mapping):
        for name, saved in tasks.items():
            if not isinstance(saved, Mapping):
                problems.append(f"taskData[{name!r}] is not an object")
                continue
            check(f"{name}.level", saved.get("level", 0), config.max_level)
            check(f"{name}.xp", saved.get("xp", 0), config.max_xp)
    return problems


def _restore_tasks(state: GameState, saved_tasks: Mapping[str, Any]) -> None:
    for name, saved in saved_tasks.items():
        task = state.task_data.get(name)
        if task is None:
            logger.warning("dropping unknown task %r from save", name)
            continue
        if not isinstance(saved, Mapping):
            logger.warning("task %r has malformed save data; keeping defaults", name)
            continue
        task.level = max(0, to_int(saved.get("level"), 0))
        task.max_level = max(0, to_int(saved.get("maxLevel"), 0))
        task.xp = 0
        # add_xp resolves any overflow carried in from the save
        task.add_xp(max(0.0, to_float(saved.get("xp"), 0.0)), state.config)


def _restore_requirements(state: GameState, saved_reqs: Mapping[str, Any]) -> None:
    for name, saved in saved_reqs.items():
        req = state.requirements.get(name)
        if req is None:
            logger.warning("dropping unknown requirement %r from save", name)
            continue
        if not isinstance(saved, Mapping) or saved.get("type") != req.type:
            logger.warning("requirement %r changed type; leaving it locked", name)
            continue
        req.completed = to_bool(saved.get("completed"), False)


def _restore_pointers(state: GameState, data: Mapping[str, Any]) -> None:
    job = state.task_data.get(_pointer_name(data.get("currentJob")) or "")
    if job is None or job.kind is not TaskKind.JOB:
        logger.warning("current job %r invalid; using %s", data.get("currentJob"), DEFAULT_JOB)
        job = state.task(DEFAULT_JOB)
    state.current_job = job

    skill = state.task_data.get(_pointer_name(data.get("currentSkill")) or "")
    if skill is None or skill.kind is not TaskKind.SKILL:
        logger.warning("current skill %r invalid; using %s", data.get("currentSkill"), DEFAULT_SKILL)
        skill = state.task(DEFAULT_SKILL)
    state.current_skill = skill

    prop = state.item_data.get(_pointer_name(data.get("currentProperty")) or DEFAULT_PROPERTY)
    if prop is None or prop.kind is not ItemKind.PROPERTY:
        logger.warning("current property %r invalid; using %s",
                       data.get("currentProperty"), DEFAULT_PROPERTY)
        prop = state.item(DEFAULT_PROPERTY)
    state.current_property = prop

    misc = []
    saved_misc = data.get("currentMisc") or []
    if not isinstance(saved_misc, list):
        logger.warning("currentMisc is not a list; ignoring")
        saved_misc = []
    for value in saved_misc:
        entry = state.item_data.get(_pointer_name(value) or "")
        if entry is None or entry.kind is not ItemKind.MISC:
            logger.warning("dropping unknown misc item %r from save", value)
            continue
        if entry not in misc:
            misc.append(entry)
    state.current_misc = misc


def from_dict(data: Any, config: Optional[GameConfig] = None) -> GameState:
    """Rebuild a :class:`GameState` from a save document.

    Raises :class:`SaveCorruptError` when the document is structurally
    invalid and :class:`DeprecatedSaveError` when it uses retired task names.
    """
    config = config or CONFIG
    if not is_valid_game_data(data):
        raise SaveCorruptError("save data is missing required fields")
    deprecated = sorted(set(data["taskData"]).intersection(config.deprecated_task_names))
    if deprecated:
        raise DeprecatedSaveError(f"save uses deprecated task names: {deprecated}")

    version = to_int(data.get("version"), 0)
    if version > config.save_version:
        logger.warning("save version %d is newer than supported %d", version, config.save_version)

    state = new_game(config)
    _restore_tasks(state, data["taskData"])
    _restore_requirements(state, data["requirements"])

    state.coins = min(max(0.0, to_float(data["coins"], 0.0)), config.max_coins)
    state.days = to_float(data["days"], config.initial_days)
    if state.days < 0:
        logger.warning("negative days %r in save; resetting age", state.days)
        state.days = config.initial_days
    elif state.days > config.max_days:
        logger.warning("days %r in save past the age cap; clamping", state.days)
        state.days = config.max_days
    state.evil = min(max(0.0, to_float(data["evil"], 0.0)), config.max_evil)
    state.paused = to_bool(data.get("paused"), False)
    state.time_warping_enabled = to_bool(data.get("timeWarpingEnabled"), True)
    state.rebirth_one_count = max(0, to_int(data.get("rebirthOneCount"), 0))
    state.rebirth_two_count = max(0, to_int(data.get("rebirthTwoCount"), 0))
    state.auto_promote = to_bool(data.get("autoPromote"), False)
    state.auto_learn = to_bool(data.get("autoLearn"), False)
    skipped = data.get("skippedSkills") or []
    if isinstance(skipped, list):
        state.skipped_skills = {
            name for name in skipped
            if isinstance(name, str) and name in state.task_data
            and state.task_data[name].kind is TaskKind.SKILL
        }

    _restore_pointers(state, data)

    lifespan = GameLoop(state).get_lifespan()
    if state.days >= lifespan and days_to_years(state.days) < MIN_DEATH_AGE_YEARS:
        logger.warning("character dead at %.0f days with lifespan %.0f; resetting age",
                       state.days, lifespan)
        state.days = config.initial_days
    return state


# ================================ ENTRY POINTS ================================


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise SaveCorruptError(f"save is not valid JSON: {exc}") from exc


def save_game(state: GameState, storage: KeyValueStorage) -> None:
    storage.set_item(state.config.storage_key, json.dumps(to_dict(state)))


def load_game(storage: KeyValueStorage, config: Optional[GameConfig] = None) -> GameState:
    """Load the stored game, or start a new one.

    A corrupt or deprecated save is removed from ``storage`` and replaced by a
    fresh game; the problem is only logged.
    """
    config = config or CONFIG
    text = storage.get_item(config.storage_key)
    if text is None:
        return new_game(config)
    try:
        state = from_dict(_parse(text), config)
    except SaveCorruptError as exc:
        logger.warning("discarding saved game: %s", exc)
        storage.remove_item(config.storage_key)
        return new_game(config)
    logger.info("loaded save: age %d, %d rebirths",
                days_to_years(state.days), state.rebirth_one_count + state.rebirth_two_count)
    return state


def export_save(state: GameState) -> str:
    """Return the save as a base64 string the player can copy."""
    raw = json.dumps(to_dict(state)).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def import_save(text: str, config: Optional[GameConfig] = None) -> GameState:
    """Decode a string from :func:`export_save` into a new state.

    Raises :class:`SaveCorruptError` so the caller can tell the player what
    went wrong.  The running game is never touched.
    """
    config = config or CONFIG
    try:
        raw = base64.b64decode(text.strip(), validate=True).decode("utf-8")
    except (AttributeError, binascii.Error, UnicodeDecodeError) as exc:
        raise SaveCorruptError(f"save string is not valid base64: {exc}") from exc
    data = _parse(raw)
    if not is_valid_game_data(data):
        raise SaveCorruptError("save data is missing required fields")
    problems = validate_ranges(data, config)
    if problems:
        raise SaveCorruptError("save has out-of-range values: " + "; ".join(problems))
    return from_dict(data, config)
