from __future__ import annotations

import json
from dataclasses import replace

import pytest

from core.errors import InsufficientResourceError, InvalidUpgradeError, PrestigeNotEligibleError
from core.state import NumericState
from engine.config import EngineConfig
from engine.logging import dumps_run_export
from engine.session import GameSession


def _kinds(session):
    return [e["kind"] for e in session.logs]


def test_fresh_session_is_idle():
    session = GameSession()
    state = session.get_state()
    assert state.resource == 0.0
    assert state.production_per_click == 1.0
    assert session.get_active_event() is None


def test_click_then_buy():
    session = GameSession()
    for _ in range(10):
        session.manual_action()
    state = session.purchase("photosynthesis")
    assert state.resource == 0.0
    assert state.production_per_second == 1.0
    assert "purchase" in _kinds(session)
    assert "first-growth" not in session.unlocked_achievements


def test_rejected_purchases_do_not_mutate():
    session = GameSession()
    before = session.get_state()
    with pytest.raises(InsufficientResourceError):
        session.purchase("biosphere")
    with pytest.raises(InvalidUpgradeError):
        session.purchase("nope")
    assert session.get_state() is before


def test_tick_clamps_and_ignores_bad_deltas():
    session = GameSession(config=EngineConfig(max_tick_seconds=10.0), state=NumericState(owned_upgrades={"photosynthesis": 2}))
    before = session.get_state()
    assert session.tick(-5) is before
    assert session.tick(float("nan")) is before

    state = session.tick(1_000)
    assert state.clock == 10.0
    assert state.resource == 20.0


def test_tick_runs_event_check():
    session = GameSession(state=NumericState(owned_upgrades={"photosynthesis": 1}))
    session.balance = replace(session.balance, event_chance=1.0, event_check_interval=0.0)
    session.tick(1.0)
    event = session.get_active_event()
    assert event is not None
    assert event.start_time == 1.0
    assert "event_start" in _kinds(session)

    session.tick(session.balance.event_duration)
    assert "event_end" in _kinds(session)


def test_achievement_reward_lands_in_ledger():
    session = GameSession(state=NumericState(total_resource_earned=99_999.0, owned_upgrades={"photosynthesis": 1}))
    session.manual_action()
    assert "planetary" in session.unlocked_achievements
    sources = [m.source for m in session.get_state().temporary_multipliers]
    assert "achievement:planetary" in sources
    assert session.get_state().production_per_second == 5.0


def test_attempt_prestige():
    session = GameSession(state=NumericState(total_resource_earned=50_000.0, resource=10.0))
    reward, state = session.attempt_prestige()
    assert reward.points == 10
    assert state.prestige_count == 1
    assert state.resource == 0.0
    assert "prestiged" in session.unlocked_achievements
    assert "prestige" in _kinds(session)


def test_attempt_prestige_too_early():
    session = GameSession()
    before = session.get_state()
    with pytest.raises(PrestigeNotEligibleError):
        session.attempt_prestige()
    assert session.get_state() is before


def test_daily_streak_grants_production_bonus():
    session = GameSession(state=NumericState(owned_upgrades={"photosynthesis": 9}))
    assert session.claim_daily_streak(1_700_000_000.0)
    assert session.get_state().production_per_second == pytest.approx(9.9)
    assert not session.claim_daily_streak(1_700_000_100.0)


def test_save_round_trip_drops_transient_state():
    session = GameSession(state=NumericState(resource=500.0, total_resource_earned=800.0, owned_upgrades={"photosynthesis": 3}))
    session.balance = replace(session.balance, event_chance=1.0, event_check_interval=0.0)
    session.tick(1.0)
    assert session.get_active_event() is not None

    saved = session.to_save_dict()
    loaded = GameSession.from_save_dict(json.loads(json.dumps(saved)))
    assert loaded.get_active_event() is None
    assert loaded.get_state().temporary_multipliers == ()
    assert loaded.to_save_dict() == saved
    assert loaded.get_state().production_per_second == 3.0


def test_autosave_due():
    session = GameSession(config=EngineConfig(autosave_interval=30.0))
    assert not session.save_due()
    session.tick(31.0)
    assert session.save_due()
    session.mark_saved()
    assert not session.save_due()


def test_run_export_is_json():
    session = GameSession()
    session.manual_action()
    session.tick(2.0)
    data = json.loads(dumps_run_export(session.export_run()))
    assert data["seed"] == 42
    assert data["config"]["balance_key"] == "standard"
    assert data["initial_state"]["resource"] == 0.0
    assert data["final_state"]["totalResourceEarned"] == 1.0


def test_state_snapshot_is_read_only():
    session = GameSession(state=NumericState(resource=100.0))
    session.purchase("photosynthesis")
    snapshot = session.get_state()
    with pytest.raises(TypeError):
        snapshot.owned_upgrades["biosphere"] = 50
    assert session.get_state().owned_upgrades == {"photosynthesis": 1}
    assert session.get_state().production_per_second == 1.0


def test_milestone_purchase_grants_production_burst():
    session = GameSession(state=NumericState(resource=1e6, owned_upgrades={"photosynthesis": 9}))
    state = session.purchase("photosynthesis")
    assert [m.source for m in state.temporary_multipliers] == ["milestone:photosynthesis:10"]
    assert state.production_per_second == pytest.approx(10 * 1.5 * 2.0)
    assert "upgrade_milestone" in _kinds(session)

    state = session.tick(session.balance.milestone_burst_duration)
    assert state.temporary_multipliers == ()
    assert state.production_per_second == pytest.approx(15.0)

    state = session.purchase("photosynthesis")
    assert state.temporary_multipliers == ()
    assert _kinds(session).count("upgrade_milestone") == 1
