"""
core.selfcheck
Minimal "it runs" proof for the core rules.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import replace

from .balance import get_balance_spec
from .events import update_events
from .multipliers import tick_temporary_multipliers
from .prestige import execute_prestige, is_eligible, prestige_progress
from .progression import apply_manual_action, apply_tick, cheapest_affordable, purchase, recalculate_production
from .state import default_start_state, format_amount, to_plain_dict


def run_one_hour_smoke() -> None:
    base_seed = 42
    spec = get_balance_spec("brisk")
    state = recalculate_production(default_start_state(spec), balance=spec)

    prestiges = 0
    for second in range(1, 3601):
        state = apply_manual_action(state)

        # per tick: multiplier decay -> event check -> accrual
        state = replace(state, clock=float(second))
        state, _ = tick_temporary_multipliers(state, 1.0, balance=spec)
        state, _ = update_events(state, balance=spec, base_seed=base_seed)
        before_total = state.total_resource_earned
        state = apply_tick(state, 1.0)

        while True:
            choice = cheapest_affordable(state)
            if choice is None:
                break
            state = purchase(state, choice, balance=spec)

        if is_eligible(state) and prestige_progress(state, balance=spec)["reward"].points >= 5:
            state, _ = execute_prestige(state, balance=spec)
            prestiges += 1

        # invariants
        assert state.resource >= 0.0
        assert state.total_resource_earned >= before_total
        assert state.global_multiplier >= spec.min_global_multiplier
        assert state.production_per_click > 0.0

    print("OK: one-hour core smoke test passed.")
    print("Prestiges:", prestiges, "| resource:", format_amount(state.resource))
    print("Final state:", {k: v for k, v in to_plain_dict(state).items() if k not in ("active_event", "temporary_multipliers")})


if __name__ == "__main__":
    run_one_hour_smoke()
