"""
core.multipliers
Temporary multiplier ledger: time-boxed bonuses from any source
(achievements, streak claims, upgrade milestones).

Entries of the same kind stack multiplicatively: two 2x production
entries give 4x. Expiry never divides anything out; production is
recomputed from first principles instead.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Tuple

from .balance import BalanceSpec
from .catalog import DEFAULT_UPGRADES, UpgradeDefinition
from .progression import recalculate_production
from .state import MULTIPLIER_KINDS, NumericState, TemporaryMultiplier


def add_temporary_multiplier(
    state: NumericState,
    kind: str,
    magnitude: float,
    duration_seconds: float,
    *,
    balance: BalanceSpec,
    source: str = "",
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> NumericState:
    """Append an entry and recalculate at once (bonuses are felt instantly)."""
    if kind not in MULTIPLIER_KINDS:
        raise ValueError(f"multiplier kind must be one of {MULTIPLIER_KINDS}, got {kind!r}")
    if not math.isfinite(magnitude) or magnitude <= 0:
        raise ValueError("multiplier magnitude must be a finite number > 0")
    if not math.isfinite(duration_seconds) or duration_seconds <= 0:
        raise ValueError("multiplier duration must be a finite number > 0")

    entry = TemporaryMultiplier(kind=kind, magnitude=float(magnitude), remaining=float(duration_seconds), source=str(source))
    new_state = replace(state, temporary_multipliers=(*state.temporary_multipliers, entry))
    return recalculate_production(new_state, balance=balance, upgrades=upgrades)


def tick_temporary_multipliers(
    state: NumericState,
    elapsed_seconds: float,
    *,
    balance: BalanceSpec,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> Tuple[NumericState, List[TemporaryMultiplier]]:
    """Count every entry down; drop those at or below zero.

    Returns (new_state, expired_entries).
    """
    if not math.isfinite(elapsed_seconds) or elapsed_seconds <= 0 or not state.temporary_multipliers:
        return state, []

    kept: List[TemporaryMultiplier] = []
    expired: List[TemporaryMultiplier] = []
    for m in state.temporary_multipliers:
        left = float(m.remaining) - float(elapsed_seconds)
        if left <= 0:
            expired.append(m)
        else:
            kept.append(replace(m, remaining=left))

    new_state = replace(state, temporary_multipliers=tuple(kept))
    if expired:
        new_state = recalculate_production(new_state, balance=balance, upgrades=upgrades)
    return new_state, expired
