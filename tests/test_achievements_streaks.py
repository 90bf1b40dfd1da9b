from __future__ import annotations

import pytest

from core.achievements import ACHIEVEMENTS, AchievementDefinition, evaluate_achievements, is_met
from core.streaks import ONE_DAY, StreakState, evaluate_streak, streak_bonus


def test_newly_met_achievements_in_table_order(make_state):
    state = make_state(total_resource_earned=120_000.0)
    assert [a.id for a in evaluate_achievements(state, [])] == ["first-growth", "planetary"]
    assert [a.id for a in evaluate_achievements(state, ["first-growth"])] == ["planetary"]


def test_derived_metrics_are_checked(make_state):
    state = make_state(owned_upgrades={"pulse": 9})
    assert [a.id for a in evaluate_achievements(state, [])] == ["click-master"]


def test_unknown_metric_is_a_programming_error(make_state):
    bad = AchievementDefinition("bad", "Bad", "", "no_such_field", 1)
    with pytest.raises(ValueError):
        is_met(bad, make_state())


def test_reward_kinds_are_valid():
    for a in ACHIEVEMENTS:
        if a.reward is not None:
            kind, magnitude, duration = a.reward
            assert kind in ("production", "click")
            assert magnitude > 0 and duration > 0


def test_streak_lifecycle():
    t0 = 1_700_000_000.0
    s, claimed = evaluate_streak(StreakState(), t0)
    assert claimed and s.current == 1 and s.longest == 1

    same_day, claimed = evaluate_streak(s, t0 + ONE_DAY / 2)
    assert not claimed and same_day is s

    s, claimed = evaluate_streak(s, t0 + ONE_DAY)
    assert claimed and s.current == 2 and s.longest == 2

    s, claimed = evaluate_streak(s, t0 + ONE_DAY * 5)
    assert claimed and s.current == 1 and s.longest == 2
    assert s.last_claim == t0 + ONE_DAY * 5


def test_streak_bonus_is_capped():
    assert streak_bonus(StreakState(current=1)) == pytest.approx(1.1)
    assert streak_bonus(StreakState(current=40)) == pytest.approx(2.0)
