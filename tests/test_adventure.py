import pytest

from progression.adventure import AdventureManager, encode_character_state
from progression.loop import GameLoop
from progression.state import new_game


def test_encode_character_state():
    state = new_game()
    state.task("Strength").level = 4
    state.set_misc("Book")
    snapshot = encode_character_state(state, GameLoop(state))

    assert snapshot["age"] == 14
    assert snapshot["currentJob"] == "Beggar"
    assert snapshot["isAlive"] is True
    assert snapshot["lifespan"] == 25550
    assert snapshot["rebirthCount"] == 0
    strength = next(s for s in snapshot["skills"] if s["name"] == "Strength")
    assert strength["level"] == 4
    assert strength["effect"] == pytest.approx(1.04)
    book = next(i for i in snapshot["items"] if i["name"] == "Book")
    assert book["active"] is True
    assert len(snapshot["jobs"]) == 20


def test_adventure_pauses_and_locks_the_game():
    state = new_game()
    manager = AdventureManager(state)
    manager.start_adventure()
    assert state.paused
    assert not manager.can_unpause_game()
    assert not state.set_pause()
    assert state.paused
    with pytest.raises(RuntimeError):
        manager.start_adventure()

    manager.end_adventure()
    assert not state.paused
    assert manager.can_unpause_game()
    assert state.set_pause()


def test_choice_tracking():
    manager = AdventureManager(new_game())
    manager.start_adventure()
    with pytest.raises(ValueError):
        manager.track_choice_result(True, "sneaky")
    manager.track_choice_result(False, "aggressive")
    manager.track_choice_result(False, "cautious")
    assert not manager.should_auto_end()
    manager.track_choice_result(False, "creative")
    assert manager.should_auto_end()
    assert manager.turn_count == 3


def test_base_xp_scales_with_average_level():
    state = new_game()
    manager = AdventureManager(state)
    assert manager.calculate_base_xp() == 500
    state.task("Beggar").level = 10
    state.task("Concentration").level = 20
    assert manager.calculate_base_xp() == 725
    state.task("Beggar").level = 1000
    assert manager.calculate_base_xp() == 5000


def test_high_success_bonus():
    manager = AdventureManager(new_game())
    manager.start_adventure()
    for _ in range(5):
        manager.track_choice_result(True, "aggressive")
    rewards = manager.calculate_rewards()
    assert rewards.bonus_multiplier == 2.0
    assert rewards.skill_xp["Strength"] == 5000
    assert rewards.skill_xp["Meditation"] == 0
    assert rewards.days_advanced == 0


def test_long_perfect_adventure():
    manager = AdventureManager(new_game())
    manager.start_adventure()
    for _ in range(15):
        manager.track_choice_result(True, "creative")
    rewards = manager.calculate_rewards()
    assert rewards.bonus_multiplier == 3.0
    assert rewards.skill_xp["Mana control"] == 15 * 500 * 2 * 1.5
    assert rewards.days_advanced == 1
    assert rewards.unlocks == ["Adventurer's Badge"]


def test_success_rate_scales_rewards():
    manager = AdventureManager(new_game())
    manager.start_adventure()
    manager.track_choice_result(True, "diplomatic")
    manager.track_choice_result(False, "diplomatic")
    rewards = manager.calculate_rewards()
    assert rewards.skill_xp["Meditation"] == 500


def test_early_manual_end_penalty():
    manager = AdventureManager(new_game())
    manager.start_adventure()
    manager.track_choice_result(True, "cautious")
    manager.track_choice_result(True, "cautious")
    assert manager.calculate_rewards().skill_xp["Concentration"] == 1000
    rewards = manager.calculate_rewards(manual_end=True)
    assert rewards.reward_multiplier == 0.9
    assert rewards.skill_xp["Concentration"] == 900


def test_end_adventure_applies_rewards():
    state = new_game()
    manager = AdventureManager(state)
    manager.start_adventure()
    for _ in range(10):
        manager.track_choice_result(True, "aggressive")
    days = state.days
    summary = manager.end_adventure()

    assert summary["successCount"] == 10
    assert summary["rewards"].skill_xp["Strength"] == 15000
    strength = state.task("Strength")
    assert strength.level > 0
    assert 0 <= strength.xp < strength.get_max_xp()
    assert state.days == days + 1
    assert manager.turn_count == 0

    # ending twice does nothing
    level = strength.level
    manager.end_adventure()
    assert strength.level == level
