"""
core.achievements
Achievement table: metric thresholds over NumericState.

Conditions are data (metric name + threshold), not callables, so the table
can be listed and saved. Some achievements grant a temporary multiplier;
applying it is the session's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .state import CLICK, PRODUCTION, NumericState


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    metric: str          # NumericState attribute
    threshold: float
    # (kind, magnitude, duration seconds)
    reward: Optional[Tuple[str, float, float]] = None


ACHIEVEMENTS: Tuple[AchievementDefinition, ...] = (
    AchievementDefinition("first-growth", "First Sprout", "Generate 50 biomass in total.", "total_resource_earned", 50),
    AchievementDefinition("click-master", "Click Master", "Reach 10 biomass per click.", "production_per_click", 10, (CLICK, 2.0, 60.0)),
    AchievementDefinition("automated", "Automation Station", "Produce 100 biomass per second.", "production_per_second", 100, (PRODUCTION, 2.0, 60.0)),
    AchievementDefinition("prestiged", "New Cycle", "Complete a prestige reset.", "prestige_count", 1),
    AchievementDefinition("planetary", "Planetary Guardian", "Reach a total of 100,000 biomass.", "total_resource_earned", 100_000, (PRODUCTION, 5.0, 60.0)),
)


def is_met(achievement: AchievementDefinition, state: NumericState) -> bool:
    value = getattr(state, achievement.metric, None)
    if value is None:
        raise ValueError(f"achievement {achievement.id}: unknown metric {achievement.metric!r}")
    return float(value) >= float(achievement.threshold)


def evaluate_achievements(
    state: NumericState,
    unlocked: Iterable[str],
    achievements: Tuple[AchievementDefinition, ...] = ACHIEVEMENTS,
) -> List[AchievementDefinition]:
    """Return achievements newly met by `state` (not in `unlocked`), in table order."""
    done = set(unlocked)
    return [a for a in achievements if a.id not in done and is_met(a, state)]
