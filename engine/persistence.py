"""engine.persistence

Save layout for an external save layer.

Persisted: resource, totals, prestige fields, global multiplier, owned
upgrades (+ achievements and streak). Never persisted: active event and
temporary multipliers; a loaded state always starts idle with an empty
ledger and freshly recalculated production.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from core.balance import BalanceSpec
from core.catalog import DEFAULT_UPGRADES, UpgradeDefinition
from core.progression import recalculate_production
from core.state import NumericState, finite
from core.streaks import StreakState

SAVE_VERSION = 1


def _as_float(x: Any, default: float) -> float:
    try:
        v = float(x)
    except (TypeError, ValueError):
        return float(default)
    if math.isnan(v):
        return float(default)
    return finite(v)


def _as_int(x: Any, default: int) -> int:
    try:
        return int(x)
    except (TypeError, ValueError, OverflowError):
        return int(default)


def to_save_dict(
    state: NumericState,
    *,
    achievements: Iterable[str] = (),
    streak: Optional[StreakState] = None,
) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "version": SAVE_VERSION,
        "resource": float(state.resource),
        "totalResourceEarned": float(state.total_resource_earned),
        "prestigeCount": int(state.prestige_count),
        "prestigePoints": float(state.prestige_points),
        "globalMultiplier": float(state.global_multiplier),
        "prestigeThreshold": float(state.prestige_threshold),
        "ownedUpgrades": {str(k): int(v) for k, v in sorted(state.owned_upgrades.items()) if int(v) > 0},
        "achievements": sorted(set(achievements)),
    }
    if streak is not None:
        out["streak"] = {
            "current": int(streak.current),
            "longest": int(streak.longest),
            "lastClaim": None if streak.last_claim is None else float(streak.last_claim),
        }
    return out


def from_save_dict(
    data: Mapping[str, Any],
    *,
    balance: BalanceSpec,
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES,
) -> Tuple[NumericState, List[str], StreakState]:
    """Tolerant loader. Returns (state, achievements, streak).

    Raises ValueError for a non-mapping payload or a newer save version.
    """
    if not isinstance(data, Mapping):
        raise ValueError("save payload must be a JSON object")
    version = _as_int(data.get("version", SAVE_VERSION), SAVE_VERSION)
    if version > SAVE_VERSION:
        raise ValueError(f"unsupported save version: {version}")

    known = {u.id for u in upgrades}
    owned: Dict[str, int] = {}
    raw_owned = data.get("ownedUpgrades") or {}
    if isinstance(raw_owned, Mapping):
        for k, v in raw_owned.items():
            n = _as_int(v, 0)
            if str(k) in known and n > 0:
                owned[str(k)] = n

    state = NumericState(
        resource=max(0.0, _as_float(data.get("resource"), 0.0)),
        total_resource_earned=max(0.0, _as_float(data.get("totalResourceEarned"), 0.0)),
        production_per_click=float(balance.base_click_value),
        global_multiplier=max(float(balance.min_global_multiplier), _as_float(data.get("globalMultiplier"), balance.min_global_multiplier)),
        prestige_count=max(0, _as_int(data.get("prestigeCount"), 0)),
        prestige_points=max(0.0, _as_float(data.get("prestigePoints"), 0.0)),
        prestige_threshold=max(1.0, _as_float(data.get("prestigeThreshold"), balance.initial_prestige_threshold)),
        owned_upgrades=owned,
    )
    state = recalculate_production(state, balance=balance, upgrades=upgrades)

    raw_ach = data.get("achievements") or []
    achievements = sorted({str(a) for a in raw_ach}) if isinstance(raw_ach, list) else []

    streak = StreakState()
    raw_streak = data.get("streak")
    if isinstance(raw_streak, Mapping):
        last = raw_streak.get("lastClaim")
        streak = StreakState(
            current=max(0, _as_int(raw_streak.get("current"), 0)),
            longest=max(0, _as_int(raw_streak.get("longest"), 0)),
            last_claim=None if last is None else _as_float(last, 0.0),
        )
    return state, achievements, streak


def dumps_save(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True)


def loads_save(raw: str) -> Dict[str, Any]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("save payload must be a JSON object")
    return data
