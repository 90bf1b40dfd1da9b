"""
core.events
Random time-boxed global events.

Lifecycle per check: Idle -> SelectingEvent -> EventActive -> Reverting -> Idle.
At most one event is active. Reverting restores the pre-effect snapshot when
the inputs it was computed from are unchanged, otherwise production is
recomputed; it never divides a multiplier back out. A revert aimed at an
instance that is not the active one is ignored.
"""

from __future__ import annotations

import random
from dataclasses import replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .balance import BalanceSpec
from .catalog import DEFAULT_UPGRADES, EventDefinition, InstantGrant, UpgradeDefinition
from .progression import grant_resource, production_basis, recalculate_production
from .rng import rng_from, weighted_pick
from .state import EventInstance, EventSnapshot, NumericState

LogEntry = Dict[str, Any]


class EventPhase(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    ACTIVE = "active"
    REVERTING = "reverting"


def event_phase(state: NumericState) -> EventPhase:
    """Phase as seen between checks (selecting/reverting only exist inside one)."""
    return EventPhase.ACTIVE if state.active_event is not None else EventPhase.IDLE


def select_event(rng: random.Random, events: Tuple[EventDefinition, ...]) -> EventDefinition:
    return weighted_pick(rng, events, [float(e.weight) for e in events])


def start_event(
    state: NumericState,
    definition: EventDefinition,
    *,
    balance: BalanceSpec,
    now: Optional[float] = None,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> NumericState:
    """Snapshot, then apply. Raises RuntimeError if another event is active."""
    if state.active_event is not None:
        raise RuntimeError(f"event {state.active_event.id!r} is still active")
    t = float(state.clock if now is None else now)

    # Snapshot from a clean recalculation so it is exactly what a revert recomputes.
    base = recalculate_production(state, balance=balance, upgrades=upgrades)
    snapshot = EventSnapshot(
        production_per_second=base.production_per_second,
        production_per_click=base.production_per_click,
        global_multiplier=base.global_multiplier,
        basis=production_basis(base),
    )
    instance = EventInstance(
        id=f"{definition.id}@{t:.3f}",
        definition_id=definition.id,
        title=definition.title,
        effect=definition.effect,
        start_time=t,
        end_time=t + float(balance.event_duration),
        snapshot=snapshot,
    )

    new_state = base
    if isinstance(definition.effect, InstantGrant):
        new_state = grant_resource(new_state, base.production_per_second * float(definition.effect.seconds_of_production))
    new_state = replace(new_state, active_event=instance)
    return recalculate_production(new_state, balance=balance, upgrades=upgrades)


def revert_event(
    state: NumericState,
    instance: EventInstance,
    *,
    balance: BalanceSpec,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> Tuple[NumericState, bool]:
    """End `instance`. Returns (new_state, reverted).

    No-op (reverted=False) when `instance` is not the active event.
    """
    current = state.active_event
    if current is None or current.id != instance.id:
        return state, False

    cleared = replace(state, active_event=None)
    snap = current.snapshot
    if production_basis(cleared) == snap.basis:
        restored = replace(
            cleared,
            production_per_second=snap.production_per_second,
            production_per_click=snap.production_per_click,
            global_multiplier=snap.global_multiplier,
        )
        return restored, True
    return recalculate_production(cleared, balance=balance, upgrades=upgrades), True


def update_events(
    state: NumericState,
    *,
    balance: BalanceSpec,
    base_seed: int,
    now: Optional[float] = None,
    rng: Optional[random.Random] = None,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> Tuple[NumericState, List[LogEntry]]:
    """One scheduling check.

    1) an active event whose end_time <= now is reverted (inclusive boundary)
    2) if idle and the check interval has elapsed, roll event_chance
    3) on success pick a weighted definition and start it

    Returns (new_state, log_entries).
    """
    t = float(state.clock if now is None else now)
    logs: List[LogEntry] = []

    active = state.active_event
    if active is not None and t >= active.end_time:
        state, reverted = revert_event(state, active, balance=balance, upgrades=upgrades)
        logs.append({"t": t, "kind": "event_end", "event": active.id, "reverted": reverted})

    if state.active_event is not None:
        return state, logs
    if t - float(state.last_event_check) < float(balance.event_check_interval):
        return state, logs
    if not balance.events:
        return replace(state, last_event_check=t), logs

    roll_rng = rng or rng_from("event-roll", round(t, 3), base_seed=int(base_seed))
    state = replace(state, last_event_check=t)
    if roll_rng.random() >= float(balance.event_chance):
        return state, logs

    definition = select_event(roll_rng, balance.events)
    state = start_event(state, definition, balance=balance, now=t, upgrades=upgrades)
    logs.append(
        {
            "t": t,
            "kind": "event_start",
            "event": state.active_event.id,
            "title": definition.title,
            "ends_at": state.active_event.end_time,
        }
    )
    return state, logs
