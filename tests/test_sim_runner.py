from __future__ import annotations

from engine.sim_runner import run_headless_sim


def test_headless_sim_progresses_and_is_deterministic():
    a = run_headless_sim(seconds=900, balance_key="brisk", base_seed=5)
    b = run_headless_sim(seconds=900, balance_key="brisk", base_seed=5)

    final = a["final"]
    assert final.resource >= 0.0
    assert final.total_resource_earned > 0.0
    assert sum(final.owned_upgrades.values()) > 0 or final.prestige_count > 0
    assert "first-growth" in a["achievements"]

    assert final == b["final"]
    assert a["logs"] == b["logs"]
