import pytest

from progression.rebirth import get_evil_gain, rebirth_one, rebirth_two
from progression.state import new_game


def test_rebirth_one_banks_levels():
    state = new_game()
    beggar = state.task("Beggar")
    beggar.level = 20
    beggar.max_level = 5
    beggar.xp = 30
    state.task("Farmer").max_level = 40
    state.task("Farmer").level = 3

    rebirth_one(state)

    assert state.rebirth_one_count == 1
    assert beggar.max_level == 20
    assert beggar.level == 0
    assert beggar.xp == 0
    # a lower level never lowers the bank
    assert state.task("Farmer").max_level == 40
    assert state.evil == 0


def test_rebirth_resets_life():
    state = new_game()
    state.coins = 5000
    state.days = 365 * 40
    state.set_task("Farmer")
    state.set_task("Strength")
    state.set_property("Tent")
    state.set_misc("Book")

    rebirth_one(state)

    assert state.coins == 0
    assert state.days == 365 * 14
    assert state.current_job.name == "Beggar"
    assert state.current_skill.name == "Concentration"
    assert state.current_property.name == "Homeless"
    assert state.current_misc == []


def test_rebirth_two_wipes_bank_and_grants_evil():
    state = new_game()
    state.task("Beggar").level = 20
    rebirth_one(state)
    assert state.task("Beggar").max_level == 20

    gain = get_evil_gain(state)
    evil_before = state.evil
    rebirth_two(state)

    assert state.rebirth_two_count == 1
    assert state.evil == pytest.approx(evil_before + gain)
    assert state.evil > evil_before
    assert all(task.max_level == 0 for task in state.task_data.values())


def test_evil_gain_is_taken_before_reset():
    state = new_game()
    state.task("Evil control").level = 10
    state.task("Blood meditation").level = 50
    gained = rebirth_two(state)
    assert gained == pytest.approx(1.1 * 1.5)
    assert state.evil == pytest.approx(1.65)
    assert state.task("Evil control").level == 0


def test_rebirth_relocks_non_permanent_requirements():
    state = new_game()
    state.coins = 1000
    state.days = 365 * 30
    state.task("Beggar").level = 10
    for name in ("Shop", "Automation", "Farmer", "Rebirth tab"):
        assert state.requirement(name).is_completed(state)

    rebirth_one(state)

    assert state.requirement("Shop").completed
    assert state.requirement("Automation").completed
    assert not state.requirement("Farmer").completed
    assert not state.requirement("Rebirth tab").completed
