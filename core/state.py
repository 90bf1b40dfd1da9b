"""
core.state
Core domain data models (UI independent).

NumericState is a frozen record: every engine operation takes one and
returns a new one, so a rejected operation leaves the caller's state intact.
"""

from __future__ import annotations

import math
import sys
from dataclasses import asdict, dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .balance import BalanceSpec, get_balance_spec
from .catalog import EventEffect

FLOAT_CEILING = sys.float_info.max

PRODUCTION = "production"
CLICK = "click"
MULTIPLIER_KINDS = (PRODUCTION, CLICK)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def finite(x: float) -> float:
    """NaN -> 0, +-inf -> +-FLOAT_CEILING. Keeps totals orderable forever."""
    x = float(x)
    if math.isnan(x):
        return 0.0
    return clamp(x, -FLOAT_CEILING, FLOAT_CEILING)


@dataclass(frozen=True)
class TemporaryMultiplier:
    """A time-boxed bonus. `remaining` counts down in seconds."""
    kind: str            # production | click
    magnitude: float
    remaining: float
    source: str = ""


@dataclass(frozen=True)
class EventSnapshot:
    """Derived values right before an event effect was applied.

    `basis` fingerprints the inputs those values were computed from
    (owned upgrades, global multiplier, temporary multipliers).
    """
    production_per_second: float
    production_per_click: float
    global_multiplier: float
    basis: Tuple


@dataclass(frozen=True)
class EventInstance:
    id: str                 # unique per instance
    definition_id: str
    title: str
    effect: EventEffect
    start_time: float
    end_time: float
    snapshot: EventSnapshot


@dataclass(frozen=True)
class NumericState:
    """The canonical game aggregate.

    production_per_second / production_per_click are derived: the engines
    recompute them after every change to owned upgrades or multipliers.
    `clock` is session time in seconds, advanced only by ticks.
    `owned_upgrades` is a read-only mapping; purchases build a new one.
    """

    resource: float = 0.0
    total_resource_earned: float = 0.0
    production_per_second: float = 0.0
    production_per_click: float = 1.0
    global_multiplier: float = 1.0
    prestige_count: int = 0
    prestige_points: float = 0.0
    prestige_threshold: float = 5_000.0
    owned_upgrades: Mapping[str, int] = field(default_factory=dict)
    active_event: Optional[EventInstance] = None
    temporary_multipliers: Tuple[TemporaryMultiplier, ...] = ()
    clock: float = 0.0
    last_event_check: float = 0.0

    def __post_init__(self) -> None:
        # private copy behind a read-only view
        object.__setattr__(self, "owned_upgrades", MappingProxyType(dict(self.owned_upgrades)))

    def owned(self, upgrade_id: str) -> int:
        return int(self.owned_upgrades.get(upgrade_id, 0))


def to_plain_dict(state: NumericState) -> Dict[str, Any]:
    """JSON-friendly dump of every field (asdict cannot copy the read-only mapping)."""
    out: Dict[str, Any] = {f.name: getattr(state, f.name) for f in fields(state)}
    out["owned_upgrades"] = dict(state.owned_upgrades)
    out["active_event"] = None if state.active_event is None else asdict(state.active_event)
    out["temporary_multipliers"] = [asdict(m) for m in state.temporary_multipliers]
    return out


def combined_multipliers(entries: Iterable[TemporaryMultiplier]) -> Tuple[float, float]:
    """Return (production_factor, click_factor); same-kind entries multiply."""
    production = 1.0
    click = 1.0
    for m in entries:
        if m.kind == PRODUCTION:
            production *= float(m.magnitude)
        elif m.kind == CLICK:
            click *= float(m.magnitude)
    return finite(production), finite(click)


def default_start_state(balance: Optional[BalanceSpec] = None) -> NumericState:
    """Baseline start state.

    Keep it in core so headless tests and UI share the same baseline.
    """
    spec = balance or get_balance_spec("standard")
    return NumericState(
        production_per_click=float(spec.base_click_value),
        global_multiplier=float(spec.min_global_multiplier),
        prestige_threshold=float(spec.initial_prestige_threshold),
    )


_SUFFIXES = ("", "K", "M", "B", "T")


def format_amount(x: float) -> str:
    """Compact display: 950 -> '950', 12_345 -> '12.35K', 1e18 -> '1.00e+18'."""
    x = finite(x)
    if abs(x) < 1_000:
        return f"{x:,.0f}" if float(x).is_integer() else f"{x:,.1f}"
    tier = int(math.log10(abs(x)) // 3)
    if tier >= len(_SUFFIXES):
        return f"{x:.2e}"
    return f"{x / 10 ** (3 * tier):.2f}{_SUFFIXES[tier]}"
