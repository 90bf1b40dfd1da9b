"""engine.session

The running game session: sole owner of the NumericState.

Responsibilities:
- expose the host-facing operations (state, purchase, tick, manual action, prestige, active event)
- per tick: temporary multiplier decay -> event check -> production accrual
- upgrade milestone bursts on purchase
- achievements / daily streak bookkeeping and the run log

Every operation runs to completion synchronously; a rejected operation
raises an EngineError and leaves the session state as it was.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from core.achievements import ACHIEVEMENTS, AchievementDefinition, evaluate_achievements
from core.balance import BalanceSpec, get_balance_spec
from core.catalog import DEFAULT_UPGRADES, UpgradeDefinition, get_upgrade
from core.events import update_events
from core.multipliers import add_temporary_multiplier, tick_temporary_multipliers
from core.prestige import PrestigeReward, execute_prestige, prestige_progress
from core.progression import apply_manual_action, apply_tick, compute_cost, list_upgrades, purchase, recalculate_production
from core.state import PRODUCTION, EventInstance, NumericState, clamp, default_start_state
from core.streaks import STREAK_BONUS_DURATION, StreakState, evaluate_streak, streak_bonus

from .config import EngineConfig
from .logging import log_entry, make_run_export
from . import persistence


@dataclass
class GameSession:
    config: EngineConfig = field(default_factory=EngineConfig)
    state: Optional[NumericState] = None
    unlocked_achievements: List[str] = field(default_factory=list)
    streak: StreakState = field(default_factory=StreakState)
    upgrades: Tuple[UpgradeDefinition, ...] = DEFAULT_UPGRADES
    achievements: Tuple[AchievementDefinition, ...] = ACHIEVEMENTS

    # runtime
    logs: List[Dict[str, Any]] = field(default_factory=list)
    balance: BalanceSpec = field(init=False)
    _initial_save: Dict[str, Any] = field(init=False, default_factory=dict)
    _last_save_clock: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.balance = get_balance_spec(self.config.balance_key)
        base = self.state if self.state is not None else default_start_state(self.balance)
        self.state = recalculate_production(base, balance=self.balance, upgrades=self.upgrades)
        self._initial_save = self.to_save_dict()
        self._last_save_clock = float(self.state.clock)

    @staticmethod
    def from_save_dict(data: Dict[str, Any], config: Optional[EngineConfig] = None) -> "GameSession":
        cfg = config or EngineConfig()
        state, achievements, streak = persistence.from_save_dict(data, balance=get_balance_spec(cfg.balance_key))
        return GameSession(config=cfg, state=state, unlocked_achievements=achievements, streak=streak)

    # -------------------------
    # Host-facing operations
    # -------------------------

    def get_state(self) -> NumericState:
        """Read-only snapshot: NumericState is frozen and its ownership mapping is read-only."""
        return self.state

    def get_active_event(self) -> Optional[EventInstance]:
        return self.state.active_event

    def purchase(self, upgrade_id: str) -> NumericState:
        definition = get_upgrade(upgrade_id, self.upgrades)
        cost = compute_cost(definition, self.state.owned(definition.id))
        self.state = purchase(self.state, upgrade_id, balance=self.balance, upgrades=self.upgrades)
        owned = self.state.owned(definition.id)
        self._log("purchase", upgrade=definition.id, cost=cost, owned=owned)
        if owned in definition.milestones:
            self._log("upgrade_milestone", upgrade=definition.id, owned=owned)
            self.add_temporary_multiplier(
                PRODUCTION,
                self.balance.milestone_burst_multiplier,
                self.balance.milestone_burst_duration,
                source=f"milestone:{definition.id}:{owned}",
            )
        self._check_achievements()
        return self.state

    def manual_action(self) -> NumericState:
        self.state = apply_manual_action(self.state)
        self._check_achievements()
        return self.state

    def tick(self, elapsed_seconds: float) -> NumericState:
        """Advance the session clock. Non-finite or negative deltas are ignored; large ones clamped."""
        try:
            elapsed = float(elapsed_seconds)
        except (TypeError, ValueError):
            return self.state
        if not math.isfinite(elapsed) or elapsed <= 0:
            return self.state
        elapsed = clamp(elapsed, 0.0, float(self.config.max_tick_seconds))

        state = replace(self.state, clock=self.state.clock + elapsed)
        state, expired = tick_temporary_multipliers(state, elapsed, balance=self.balance, upgrades=self.upgrades)
        for m in expired:
            self._log("multiplier_expired", at=state.clock, multiplier=m.kind, magnitude=m.magnitude, source=m.source)
        state, event_logs = update_events(state, balance=self.balance, base_seed=self.config.base_seed, upgrades=self.upgrades)
        state = apply_tick(state, elapsed)

        self.state = state
        self.logs.extend(event_logs)
        self._check_achievements()
        return self.state

    def attempt_prestige(self) -> Tuple[PrestigeReward, NumericState]:
        self.state, reward = execute_prestige(self.state, balance=self.balance, upgrades=self.upgrades)
        self._log(
            "prestige",
            points=reward.points,
            bonus_multiplier_delta=reward.bonus_multiplier_delta,
            milestone=reward.milestone,
            prestige_count=self.state.prestige_count,
        )
        self._check_achievements()
        return reward, self.state

    # -------------------------
    # Bonuses / bookkeeping
    # -------------------------

    def add_temporary_multiplier(self, kind: str, magnitude: float, duration_seconds: float, source: str = "") -> NumericState:
        self.state = add_temporary_multiplier(
            self.state, kind, magnitude, duration_seconds, balance=self.balance, source=source, upgrades=self.upgrades
        )
        self._log("multiplier_added", multiplier=kind, magnitude=float(magnitude), duration=float(duration_seconds), source=source)
        return self.state

    def claim_daily_streak(self, now: float) -> bool:
        """`now` is wall-clock epoch seconds. Returns True if a claim happened."""
        self.streak, claimed = evaluate_streak(self.streak, now)
        if claimed:
            self._log("streak_claim", current=self.streak.current, longest=self.streak.longest)
            self.add_temporary_multiplier(PRODUCTION, streak_bonus(self.streak), STREAK_BONUS_DURATION, source="streak")
        return claimed

    def _check_achievements(self) -> None:
        newly = evaluate_achievements(self.state, self.unlocked_achievements, self.achievements)
        for a in newly:
            self.unlocked_achievements.append(a.id)
            self._log("achievement", achievement=a.id, name=a.name)
            if a.reward is not None:
                kind, magnitude, duration = a.reward
                self.add_temporary_multiplier(kind, magnitude, duration, source=f"achievement:{a.id}")

    def _log(self, kind: str, **fields: Any) -> None:
        self.logs.append(log_entry(self.state.clock, kind, **fields))

    # -------------------------
    # Read models
    # -------------------------

    def upgrade_rows(self) -> List[Dict[str, Any]]:
        return list_upgrades(self.state, self.upgrades)

    def prestige_progress(self) -> Dict[str, Any]:
        return prestige_progress(self.state, balance=self.balance)

    # -------------------------
    # Persistence / export
    # -------------------------

    def to_save_dict(self) -> Dict[str, Any]:
        return persistence.to_save_dict(self.state, achievements=self.unlocked_achievements, streak=self.streak)

    def save_due(self) -> bool:
        return self.state.clock - self._last_save_clock >= float(self.config.autosave_interval)

    def mark_saved(self) -> Dict[str, Any]:
        self._last_save_clock = float(self.state.clock)
        return self.to_save_dict()

    def export_run(self) -> Dict[str, Any]:
        return make_run_export(
            seed=self.config.base_seed,
            config=asdict(self.config),
            initial_state=self._initial_save,
            final_state=self.to_save_dict(),
            entries=self.logs,
        )
