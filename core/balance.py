"""
core.balance
Balance presets (tuning constants for production, prestige and events).

Kept in core so balancing lives in one place, but UI can still display labels.
None of these numbers are contracts; tests pin behavior, not tuning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .catalog import DEFAULT_EVENTS, EventDefinition


@dataclass(frozen=True)
class BalanceSpec:
    key: str
    desc: str

    base_click_value: float = 1.0
    min_global_multiplier: float = 1.0

    # per-upgrade ownership milestones
    upgrade_milestone_bonus: float = 1.5         # x per milestone reached
    milestone_burst_multiplier: float = 2.0
    milestone_burst_duration: float = 10.0

    initial_prestige_threshold: float = 5_000.0
    prestige_base_requirement: float = 5_000.0
    prestige_threshold_growth: float = 2.5
    prestige_points_scale: float = 10.0
    prestige_level_bonus: float = 0.1            # per prior prestige
    prestige_multiplier_per_point: float = 0.05
    # (prestige count reached, permanent multiplier bonus, name)
    prestige_milestones: Tuple[Tuple[int, float, str], ...] = (
        (1, 1.0, "First Transcendence"),
        (5, 0.5, "Experienced Ascender"),
        (10, 1.5, "Master of Rebirth"),
        (25, 2.0, "Eternal One"),
        (100, 10.0, "Godhood"),
    )

    event_check_interval: float = 300.0          # seconds between rolls
    event_chance: float = 0.2
    event_duration: float = 60.0
    events: Tuple[EventDefinition, ...] = DEFAULT_EVENTS

    def __post_init__(self) -> None:
        if self.prestige_threshold_growth <= 1:
            raise ValueError("prestige_threshold_growth must be > 1")
        if self.min_global_multiplier <= 0:
            raise ValueError("min_global_multiplier must be > 0")
        if self.upgrade_milestone_bonus < 1:
            raise ValueError("upgrade_milestone_bonus must be >= 1")
        if not 0.0 <= self.event_chance <= 1.0:
            raise ValueError("event_chance must be within 0..1")
        if self.event_duration <= 0:
            raise ValueError("event_duration must be > 0")


DEFAULT_BALANCES: Dict[str, BalanceSpec] = {
    "standard": BalanceSpec(
        key="standard",
        desc="Original pacing. One event roll every five minutes.",
    ),
    "brisk": BalanceSpec(
        key="brisk",
        desc="Shorter loop for demos: frequent, shorter events.",
        initial_prestige_threshold=2_500.0,
        prestige_base_requirement=2_500.0,
        event_check_interval=60.0,
        event_chance=0.35,
        event_duration=30.0,
    ),
}


def get_balance_spec(balance_key: str) -> BalanceSpec:
    return DEFAULT_BALANCES.get(balance_key, DEFAULT_BALANCES["standard"])
