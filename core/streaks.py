"""
core.streaks
Daily return streak.

Timestamps are epoch seconds supplied by the caller; nothing here reads a clock.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

ONE_DAY = 24 * 60 * 60.0

STREAK_BONUS_PER_DAY = 0.1
STREAK_BONUS_MAX_DAYS = 10
STREAK_BONUS_DURATION = 300.0


@dataclass(frozen=True)
class StreakState:
    current: int = 0
    longest: int = 0
    last_claim: Optional[float] = None


def evaluate_streak(streak: StreakState, now: float) -> Tuple[StreakState, bool]:
    """Returns (new_streak, claimed).

    first claim -> 1; 1..2 days since last -> +1; >= 2 days -> back to 1;
    under a day -> unchanged, claimed=False.
    """
    now = float(now)
    if streak.last_claim is None:
        return StreakState(current=1, longest=max(streak.longest, 1), last_claim=now), True

    diff = now - float(streak.last_claim)
    if ONE_DAY <= diff < 2 * ONE_DAY:
        current = streak.current + 1
        return StreakState(current=current, longest=max(streak.longest, current), last_claim=now), True
    if diff >= 2 * ONE_DAY:
        return replace(streak, current=1, last_claim=now), True
    return streak, False


def streak_bonus(streak: StreakState) -> float:
    """Production multiplier granted on a claim."""
    days = min(max(streak.current, 0), STREAK_BONUS_MAX_DAYS)
    return 1.0 + STREAK_BONUS_PER_DAY * days
