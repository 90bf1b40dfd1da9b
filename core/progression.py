"""
core.progression
Economy rules:
- upgrade cost curve
- purchases
- production recalculation (owned upgrades x multipliers)
- accrual from ticks and manual actions

All functions are pure: they return a new NumericState.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from .balance import BalanceSpec
from .catalog import (
    DEFAULT_UPGRADES,
    ClickMultiplier,
    ProductionMultiplier,
    UpgradeDefinition,
    get_upgrade,
)
from .errors import InsufficientResourceError
from .state import FLOAT_CEILING, EventInstance, NumericState, combined_multipliers, finite


def compute_cost(upgrade: UpgradeDefinition, owned_count: int) -> float:
    """ceil(base_cost * cost_growth ** owned_count), pinned at FLOAT_CEILING."""
    owned_count = max(0, int(owned_count))
    try:
        raw = float(upgrade.base_cost) * float(upgrade.cost_growth) ** owned_count
    except OverflowError:
        return FLOAT_CEILING
    if not math.isfinite(raw) or raw >= FLOAT_CEILING:
        return FLOAT_CEILING
    return float(math.ceil(raw))


def milestones_reached(upgrade: UpgradeDefinition, owned_count: int) -> int:
    return sum(1 for m in upgrade.milestones if owned_count >= m)


def next_milestone(upgrade: UpgradeDefinition, owned_count: int) -> Optional[int]:
    return next((m for m in upgrade.milestones if m > owned_count), None)


def milestone_multiplier(upgrade: UpgradeDefinition, owned_count: int, *, balance: BalanceSpec) -> float:
    """Factor on this upgrade's own per-second output: bonus ** milestones reached."""
    return finite(float(balance.upgrade_milestone_bonus) ** milestones_reached(upgrade, owned_count))


def production_basis(state: NumericState) -> Tuple:
    """Fingerprint of everything recalculation reads, except the active event."""
    return (
        tuple(sorted((k, int(v)) for k, v in state.owned_upgrades.items() if int(v) > 0)),
        float(state.global_multiplier),
        tuple((m.kind, float(m.magnitude), m.source) for m in state.temporary_multipliers),
    )


def _event_factors(event: Optional[EventInstance]) -> Tuple[float, float]:
    if event is None:
        return 1.0, 1.0
    effect = event.effect
    if isinstance(effect, ProductionMultiplier):
        m = float(effect.magnitude)
        return m, (m if effect.include_click else 1.0)
    if isinstance(effect, ClickMultiplier):
        return 1.0, float(effect.magnitude)
    return 1.0, 1.0


def recalculate_production(
    state: NumericState,
    *,
    balance: BalanceSpec,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> NumericState:
    """Recompute production_per_second / production_per_click from first principles.

    passive = sum(owned * per_second * milestone factor), click = base_click + sum(owned * per_click),
    both scaled by global multiplier, upgrade multiplier, temporary multipliers
    and the active event. Idempotent.
    """
    passive = 0.0
    click = float(balance.base_click_value)
    upgrade_mult = 1.0
    for u in upgrades:
        owned = state.owned(u.id)
        if owned <= 0:
            continue
        passive += float(u.production_per_second) * owned * milestone_multiplier(u, owned, balance=balance)
        click += float(u.production_per_click) * owned
        upgrade_mult += float(u.multiplier) * owned

    global_mult = max(float(balance.min_global_multiplier), finite(state.global_multiplier))
    temp_production, temp_click = combined_multipliers(state.temporary_multipliers)
    event_production, event_click = _event_factors(state.active_event)

    multiplier = finite(global_mult * upgrade_mult)
    return replace(
        state,
        global_multiplier=global_mult,
        production_per_second=finite(passive * multiplier * temp_production * event_production),
        production_per_click=finite(click * multiplier * temp_click * event_click),
    )


def purchase(
    state: NumericState,
    upgrade_id: str,
    *,
    balance: BalanceSpec,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> NumericState:
    """Buy one unit. Raises InvalidUpgradeError / InsufficientResourceError."""
    definition = get_upgrade(upgrade_id, upgrades)
    owned = state.owned(definition.id)
    cost = compute_cost(definition, owned)
    if state.resource < cost:
        raise InsufficientResourceError(definition.id, cost, state.resource)

    new_owned = dict(state.owned_upgrades)
    new_owned[definition.id] = owned + 1
    new_state = replace(
        state,
        resource=max(0.0, finite(state.resource - cost)),
        owned_upgrades=new_owned,
    )
    return recalculate_production(new_state, balance=balance, upgrades=upgrades)


def grant_resource(state: NumericState, amount: float) -> NumericState:
    """Add earned resource; lifetime total grows by the same amount."""
    amount = finite(amount)
    if amount <= 0:
        return state
    return replace(
        state,
        resource=finite(state.resource + amount),
        total_resource_earned=finite(state.total_resource_earned + amount),
    )


def apply_tick(state: NumericState, elapsed_seconds: float) -> NumericState:
    """Accrue production for elapsed_seconds. Negative / non-finite deltas are a no-op."""
    try:
        elapsed = float(elapsed_seconds)
    except (TypeError, ValueError):
        return state
    if not math.isfinite(elapsed) or elapsed <= 0:
        return state
    return grant_resource(state, state.production_per_second * elapsed)


def apply_manual_action(state: NumericState) -> NumericState:
    return grant_resource(state, state.production_per_click)


def list_upgrades(
    state: NumericState,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> List[Dict[str, Any]]:
    """Display rows: definition fields + owned, current cost, affordable, next milestone."""
    rows: List[Dict[str, Any]] = []
    for u in upgrades:
        owned = state.owned(u.id)
        cost = compute_cost(u, owned)
        rows.append(
            {
                "id": u.id,
                "name": u.name,
                "description": u.description,
                "owned": owned,
                "cost": cost,
                "affordable": state.resource >= cost,
                "next_milestone": next_milestone(u, owned),
            }
        )
    return rows


def cheapest_affordable(
    state: NumericState,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> Optional[str]:
    rows = [r for r in list_upgrades(state, upgrades) if r["affordable"]]
    if not rows:
        return None
    return min(rows, key=lambda r: (r["cost"], r["id"]))["id"]
