from __future__ import annotations

import pytest

from core.errors import PrestigeNotEligibleError
from core.events import start_event
from core.catalog import DEFAULT_EVENTS
from core.multipliers import add_temporary_multiplier
from core.prestige import calculate_reward, execute_prestige, is_eligible, milestone_for, prestige_progress
from core.state import PRODUCTION


def test_eligibility_uses_lifetime_total(make_state):
    assert not is_eligible(make_state(total_resource_earned=4999.0, prestige_threshold=5000.0))
    assert is_eligible(make_state(total_resource_earned=5000.0, prestige_threshold=5000.0))


def test_reward_at_threshold_is_zero_not_negative(spec, make_state):
    state = make_state(total_resource_earned=spec.prestige_base_requirement, prestige_threshold=spec.prestige_base_requirement)
    reward = calculate_reward(state, balance=spec)
    assert reward.points == 0
    assert reward.bonus_multiplier_delta == 0.0
    with pytest.raises(PrestigeNotEligibleError):
        execute_prestige(state, balance=spec)


def test_reward_below_base_requirement_is_zero(spec, make_state):
    assert calculate_reward(make_state(total_resource_earned=1.0), balance=spec).points == 0
    assert calculate_reward(make_state(total_resource_earned=0.0), balance=spec).points == 0


def test_first_prestige_reward_includes_milestone(spec, make_state):
    reward = calculate_reward(make_state(total_resource_earned=50_000.0), balance=spec)
    assert reward.points == 10
    assert reward.bonus_multiplier_delta == pytest.approx(10 * 0.05 + 1.0)
    assert reward.milestone == "First Transcendence"


def test_later_prestiges_scale_with_level(spec, make_state):
    reward = calculate_reward(make_state(total_resource_earned=500_000.0, prestige_count=1), balance=spec)
    assert reward.points == 22
    assert reward.milestone is None
    assert reward.bonus_multiplier_delta == pytest.approx(22 * 0.05)


def test_reward_is_monotonic_in_total_earned(spec, make_state):
    totals = [5_000 * 1.37 ** k for k in range(40)]
    points = [calculate_reward(make_state(total_resource_earned=t), balance=spec).points for t in totals]
    assert all(b >= a for a, b in zip(points, points[1:]))


def test_execute_resets_run_and_keeps_lifetime(spec, make_state):
    state = make_state(
        resource=1234.0,
        total_resource_earned=50_000.0,
        prestige_threshold=5_000.0,
        owned_upgrades={"photosynthesis": 3, "pulse": 2},
        clock=100.0,
    )
    state = add_temporary_multiplier(state, PRODUCTION, 2.0, 60, balance=spec)
    state = start_event(state, DEFAULT_EVENTS[0], balance=spec)

    new, reward = execute_prestige(state, balance=spec)

    assert reward.points == 10
    assert new.resource == 0.0
    assert new.owned_upgrades == {}
    assert new.production_per_second == 0.0
    assert new.global_multiplier == pytest.approx(2.5)
    assert new.production_per_click == pytest.approx(spec.base_click_value * new.global_multiplier)
    assert new.prestige_count == 1
    assert new.prestige_points == 10
    assert new.prestige_threshold == 5_000.0 * spec.prestige_threshold_growth
    assert new.total_resource_earned == 50_000.0
    assert new.active_event is None
    assert new.temporary_multipliers == ()
    assert new.clock == 100.0


def test_prestige_never_decreases_counters(spec, make_state):
    state = make_state(total_resource_earned=10**7, prestige_threshold=5_000.0)
    for _ in range(4):
        before = state
        state, _ = execute_prestige(state, balance=spec)
        assert state.prestige_points >= before.prestige_points
        assert state.prestige_count == before.prestige_count + 1
        assert state.total_resource_earned == before.total_resource_earned
        assert state.prestige_threshold > before.prestige_threshold
        assert state.global_multiplier >= before.global_multiplier


def test_not_eligible_leaves_state_untouched(spec, make_state):
    state = make_state(resource=10.0, total_resource_earned=100.0, owned_upgrades={"photosynthesis": 1})
    with pytest.raises(PrestigeNotEligibleError) as exc:
        execute_prestige(state, balance=spec)
    assert exc.value.threshold == state.prestige_threshold
    assert state.owned_upgrades == {"photosynthesis": 1}
    assert state.resource == 10.0


def test_progress_view(spec, make_state):
    half = prestige_progress(make_state(total_resource_earned=2_500.0), balance=spec)
    assert half["progress"] == 0.5
    assert half["eligible"] is False
    full = prestige_progress(make_state(total_resource_earned=1e9), balance=spec)
    assert full["progress"] == 1.0
    assert full["reward"].points > 0


def test_milestone_lookup(spec):
    assert milestone_for(1, spec)[2] == "First Transcendence"
    assert milestone_for(2, spec) is None
