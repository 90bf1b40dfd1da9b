"""engine.sim_runner

Headless runner for quick sanity checks and balance tuning.

Deterministic: the only randomness is the seeded event roll, and the
"player" is a tiny built-in greedy bot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from core.progression import cheapest_affordable

from .config import EngineConfig
from .session import GameSession


@dataclass
class GreedyPlayer:
    """Clicks a fixed rate, buys the cheapest affordable upgrade, prestiges for enough points."""

    clicks_per_second: int = 5
    min_prestige_points: int = 5

    def act(self, session: GameSession) -> None:
        for _ in range(self.clicks_per_second):
            session.manual_action()

        while True:
            choice = cheapest_affordable(session.get_state(), session.upgrades)
            if choice is None:
                break
            session.purchase(choice)

        progress = session.prestige_progress()
        if progress["eligible"] and progress["reward"].points >= self.min_prestige_points:
            session.attempt_prestige()


def run_headless_sim(seconds: int = 3_600, step: float = 1.0, base_seed: int = 123, balance_key: str = "standard") -> Dict[str, Any]:
    """Run a deterministic simulation and return summary."""
    cfg = EngineConfig(base_seed=base_seed, balance_key=balance_key)
    session = GameSession(config=cfg)
    player = GreedyPlayer()

    steps = int(seconds / step)
    for _ in range(steps):
        player.act(session)
        session.tick(step)

    final = session.get_state()
    return {
        "seconds": seconds,
        "final": final,
        "prestiges": final.prestige_count,
        "events": sum(1 for e in session.logs if e.get("kind") == "event_start"),
        "achievements": list(session.unlocked_achievements),
        "logs": session.logs,
    }
