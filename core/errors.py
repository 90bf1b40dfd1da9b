"""
core.errors
Engine error taxonomy.

Every error is local and recoverable: the operation that raised it made no
change to the state it was given.
"""

from __future__ import annotations

from typing import Optional


class EngineError(Exception):
    """Base class for rejected engine operations."""


class InvalidUpgradeError(EngineError):
    def __init__(self, upgrade_id: str) -> None:
        super().__init__(f"Unknown upgrade id: {upgrade_id!r}")
        self.upgrade_id = upgrade_id


class InsufficientResourceError(EngineError):
    def __init__(self, upgrade_id: str, cost: float, available: float) -> None:
        super().__init__(f"Cannot afford {upgrade_id!r}: cost {cost:,.0f}, available {available:,.2f}")
        self.upgrade_id = upgrade_id
        self.cost = float(cost)
        self.available = float(available)


class PrestigeNotEligibleError(EngineError):
    def __init__(self, threshold: float, total_earned: float, points: Optional[int] = None) -> None:
        if points is not None and total_earned >= threshold:
            msg = f"Prestige reward would be {points} points; keep growing"
        else:
            msg = f"Prestige requires {threshold:,.0f} total earned, have {total_earned:,.0f}"
        super().__init__(msg)
        self.threshold = float(threshold)
        self.total_earned = float(total_earned)
        self.points = points
