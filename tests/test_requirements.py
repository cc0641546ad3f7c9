import pytest

from progression.errors import MissingEntityError
from progression.requirements import (
    AgeRequirement,
    CoinRequirement,
    Condition,
    EvilRequirement,
    TaskRequirement,
    build_requirements,
)
from progression.state import new_game


def test_task_requirement_needs_every_condition():
    state = new_game()
    miner = state.requirement("Miner")
    state.task("Fisherman").level = 10
    assert not miner.is_completed(state)
    state.task("Strength").level = 10
    assert miner.is_completed(state)


def test_completion_is_memoized(monkeypatch):
    state = new_game()
    calls = []
    original = TaskRequirement.get_condition

    def spy(self, st, condition):
        calls.append(condition)
        return original(self, st, condition)

    monkeypatch.setattr(TaskRequirement, "get_condition", spy)
    farmer = state.requirement("Farmer")
    assert not farmer.is_completed(state)
    state.task("Beggar").level = 10
    assert farmer.is_completed(state)
    evaluated = len(calls)

    # dropping below the threshold does not relock a completed requirement
    state.task("Beggar").level = 0
    for _ in range(5):
        assert farmer.is_completed(state)
    assert len(calls) == evaluated


def test_unknown_task_in_condition_raises():
    state = new_game()
    req = TaskRequirement("Broken", [], [Condition(5, "Juggling")])
    with pytest.raises(MissingEntityError):
        req.is_completed(state)
    with pytest.raises(KeyError):
        req.is_completed(state)


def test_coin_age_and_evil_requirements():
    state = new_game()
    coins = CoinRequirement("c", [], [Condition(100)])
    age = AgeRequirement("a", [], [Condition(20)])
    evil = EvilRequirement("e", [], [Condition(1)])
    assert not coins.is_completed(state)
    assert not age.is_completed(state)
    assert not evil.is_completed(state)

    state.coins = 100
    state.days = 365 * 20
    state.evil = 1
    assert coins.is_completed(state)
    assert age.is_completed(state)
    assert evil.is_completed(state)


def test_empty_requirement_is_unlocked():
    state = new_game()
    assert state.is_unlocked("Beggar")
    assert state.is_unlocked("Concentration")


def test_coin_thresholds_follow_item_expense():
    state = new_game()
    assert state.requirement("Shop").conditions[0].requirement == 750
    assert state.requirement("Cottage").conditions[0].requirement == 75000
    assert state.requirement("Tent").conditions[0].requirement == 0
    assert state.requirement("Book").conditions[0].requirement == 0


def test_build_requirements_rejects_unknown_type():
    with pytest.raises(ValueError):
        build_requirements({"x": ("mood", [], [])})
    with pytest.raises(ValueError):
        build_requirements({"x": ("task", [], [{"requirement": 1}])})
