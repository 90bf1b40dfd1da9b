"""
core.prestige
Meta-progression reset.

Reward shape: logarithmic in lifetime earnings relative to the base
requirement, floor-rounded, never negative. The reset wipes the run
(resource, upgrades, temporary multipliers, active event) and keeps the
lifetime counters plus the permanent global multiplier.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .balance import BalanceSpec
from .catalog import DEFAULT_UPGRADES, UpgradeDefinition
from .errors import PrestigeNotEligibleError
from .progression import recalculate_production
from .state import NumericState, finite


@dataclass(frozen=True)
class PrestigeReward:
    points: int
    bonus_multiplier_delta: float
    milestone: Optional[str] = None


def is_eligible(state: NumericState) -> bool:
    return state.total_resource_earned >= state.prestige_threshold


def milestone_for(prestige_count: int, balance: BalanceSpec) -> Optional[Tuple[int, float, str]]:
    for level, bonus, name in balance.prestige_milestones:
        if int(level) == int(prestige_count):
            return int(level), float(bonus), str(name)
    return None


def calculate_reward(state: NumericState, *, balance: BalanceSpec) -> PrestigeReward:
    ratio = finite(state.total_resource_earned) / float(balance.prestige_base_requirement)
    log_part = math.log10(ratio) if ratio > 1 else 0.0
    scale = float(balance.prestige_points_scale) * (1 + int(state.prestige_count) * float(balance.prestige_level_bonus))
    points = max(0, int(math.floor(finite(log_part * scale))))

    delta = points * float(balance.prestige_multiplier_per_point)
    milestone_name = None
    milestone = milestone_for(int(state.prestige_count) + 1, balance)
    if milestone is not None and points > 0:
        delta += milestone[1]
        milestone_name = milestone[2]
    return PrestigeReward(points=points, bonus_multiplier_delta=finite(delta), milestone=milestone_name)


def prestige_progress(state: NumericState, *, balance: BalanceSpec) -> Dict[str, Any]:
    threshold = float(state.prestige_threshold)
    progress = min(state.total_resource_earned / threshold, 1.0) if threshold > 0 else 1.0
    return {
        "progress": max(0.0, float(progress)),
        "eligible": is_eligible(state),
        "reward": calculate_reward(state, balance=balance),
    }


def execute_prestige(
    state: NumericState,
    *,
    balance: BalanceSpec,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> Tuple[NumericState, PrestigeReward]:
    """Reset the run. Raises PrestigeNotEligibleError (state untouched).

    Returns (new_state, reward).
    """
    reward = calculate_reward(state, balance=balance)
    if not is_eligible(state) or reward.points <= 0:
        raise PrestigeNotEligibleError(state.prestige_threshold, state.total_resource_earned, reward.points)

    # strictly increasing until it pins at FLOAT_CEILING
    new_threshold = finite(float(state.prestige_threshold) * float(balance.prestige_threshold_growth))

    reset = replace(
        state,
        resource=0.0,
        owned_upgrades={},
        production_per_second=0.0,
        production_per_click=float(balance.base_click_value),
        prestige_count=int(state.prestige_count) + 1,
        prestige_points=finite(state.prestige_points + reward.points),
        global_multiplier=max(float(balance.min_global_multiplier), finite(state.global_multiplier + reward.bonus_multiplier_delta)),
        prestige_threshold=new_threshold,
        active_event=None,
        temporary_multipliers=(),
    )
    return recalculate_production(reset, balance=balance, upgrades=upgrades), reward
