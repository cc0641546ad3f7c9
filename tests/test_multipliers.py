import pytest

from progression.multipliers import (
    EVIL,
    HAPPINESS,
    MultiplierKind,
    MultiplierSource,
    add_multipliers,
    item,
    skill,
)
from progression.state import new_game


def test_every_task_starts_with_the_common_chain():
    state = new_game()
    for task in state.task_data.values():
        head = task.xp_multipliers[:4]
        assert head == [
            MultiplierSource(MultiplierKind.MAX_LEVEL, task.name),
            HAPPINESS,
            skill("Dark influence"),
            skill("Demon training"),
        ]


def test_job_and_skill_chains():
    state = new_game()
    beggar = state.task("Beggar")
    assert beggar.xp_multipliers[4:] == [skill("Productivity"), item("Personal squire")]
    assert beggar.income_multipliers == [
        MultiplierSource(MultiplierKind.JOB_LEVEL, "Beggar"),
        skill("Demon's wealth"),
    ]

    concentration = state.task("Concentration")
    assert concentration.xp_multipliers[4:] == [
        skill("Concentration"), item("Book"), item("Study desk"), item("Library"),
    ]


def test_category_specific_chains():
    state = new_game()
    knight = state.task("Knight")
    assert knight.xp_multipliers[-2:] == [skill("Battle tactics"), item("Steel longsword")]
    assert knight.income_multipliers[-1] == skill("Strength")

    strength = state.task("Strength")
    assert strength.xp_multipliers[-2:] == [skill("Muscle memory"), item("Dumbbells")]

    assert state.task("Time warping").xp_multipliers[-1] == item("Sapphire charm")
    assert state.task("Wizard").xp_multipliers[-1] == skill("Mana control")
    assert state.task("Demon training").xp_multipliers[-1] == EVIL
    assert skill("Strength") not in state.task("Farmer").income_multipliers


def test_expense_chain_on_every_item():
    state = new_game()
    for entry in state.item_data.values():
        assert entry.expense_multipliers == [skill("Bargaining"), skill("Intimidation")]


def test_wiring_is_idempotent():
    state = new_game()
    before = {name: list(t.xp_multipliers) for name, t in state.task_data.items()}
    add_multipliers(state)
    add_multipliers(state)
    after = {name: list(t.xp_multipliers) for name, t in state.task_data.items()}
    assert before == after


def test_sources_resolve_against_live_state():
    state = new_game()
    assert HAPPINESS.evaluate(state) == 1
    state.task("Meditation").level = 10
    state.set_property("Tent")
    state.set_misc("Butler")
    assert HAPPINESS.evaluate(state) == pytest.approx(1.1 * 1.5 * 1.4)

    state.evil = 7
    assert EVIL.evaluate(state) == 7
    assert item("Butler").evaluate(state) == 1.5
    assert str(skill("Strength")) == "SkillEffect(Strength)"


def test_dark_magic_xp_scales_with_evil():
    state = new_game()
    influence = state.task("Dark influence")
    assert influence.get_xp_gain(state) == 0
    state.evil = 3
    assert influence.get_xp_gain(state) == 30
