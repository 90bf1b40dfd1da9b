"""engine.config

Engine configuration passed from the host (UI / simulation).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    base_seed: int = 42
    balance_key: str = "standard"
    max_tick_seconds: float = 3_600.0   # clamp for clock anomalies
    autosave_interval: float = 30.0
