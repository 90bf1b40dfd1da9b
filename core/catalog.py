"""
core.catalog
Static definitions: upgrades and event effects.

Plain immutable records. Behavior lives in core.progression / core.events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple, Union

from .errors import InvalidUpgradeError


@dataclass(frozen=True)
class UpgradeDefinition:
    """One purchasable upgrade.

    Cost of the n-th unit is ceil(base_cost * cost_growth ** owned).
    Contributions are per owned unit:
    - production_per_second / production_per_click: additive, before multipliers
    - multiplier: additive share of the per-run upgrade multiplier (0.04 = +4%)
    - milestones: owned counts that each boost this upgrade's own per-second output
    """

    id: str
    name: str
    description: str
    base_cost: float
    cost_growth: float
    production_per_second: float = 0.0
    production_per_click: float = 0.0
    multiplier: float = 0.0
    milestones: Tuple[int, ...] = ()


DEFAULT_UPGRADES: Tuple[UpgradeDefinition, ...] = (
    UpgradeDefinition(
        id="photosynthesis",
        name="Photosynthesis Pods",
        description="Generate 1 biomass per second.",
        base_cost=10,
        cost_growth=1.15,
        production_per_second=1,
        milestones=(10, 25, 50, 100),
    ),
    UpgradeDefinition(
        id="rainmaker",
        name="Rainmaker Drones",
        description="Each drone adds 5 biomass per second.",
        base_cost=75,
        cost_growth=1.18,
        production_per_second=5,
        milestones=(10, 50, 100, 200),
    ),
    UpgradeDefinition(
        id="biosphere",
        name="Orbital Biosphere",
        description="Terraformers add 25 biomass per second.",
        base_cost=350,
        cost_growth=1.2,
        production_per_second=25,
        milestones=(5, 10, 25, 50),
    ),
    UpgradeDefinition(
        id="pulse",
        name="Pulse Amplifiers",
        description="Boost click strength by +1 per amplifier.",
        base_cost=60,
        cost_growth=1.35,
        production_per_click=1,
    ),
    UpgradeDefinition(
        id="grove",
        name="Fractal Grove",
        description="Multiplies all production by 4%.",
        base_cost=1200,
        cost_growth=1.4,
        multiplier=0.04,
    ),
)


def validate_catalog(upgrades: Iterable[UpgradeDefinition]) -> None:
    seen = set()
    for u in upgrades:
        if not u.id or u.id in seen:
            raise ValueError(f"upgrade id must be unique and non-empty: {u.id!r}")
        seen.add(u.id)
        if u.base_cost <= 0:
            raise ValueError(f"upgrade {u.id}: base_cost must be > 0")
        if u.cost_growth <= 1:
            raise ValueError(f"upgrade {u.id}: cost_growth must be > 1")
        if min(u.production_per_second, u.production_per_click, u.multiplier) < 0:
            raise ValueError(f"upgrade {u.id}: contributions must be >= 0")
        if any(int(m) < 1 for m in u.milestones) or list(u.milestones) != sorted(set(u.milestones)):
            raise ValueError(f"upgrade {u.id}: milestones must be distinct positive counts in ascending order")


validate_catalog(DEFAULT_UPGRADES)


def upgrades_by_id(upgrades: Iterable[UpgradeDefinition] = DEFAULT_UPGRADES) -> Dict[str, UpgradeDefinition]:
    return {u.id: u for u in upgrades}


def get_upgrade(upgrade_id: str, upgrades: Iterable[UpgradeDefinition] = DEFAULT_UPGRADES) -> UpgradeDefinition:
    for u in upgrades:
        if u.id == upgrade_id:
            return u
    raise InvalidUpgradeError(str(upgrade_id))


# -------------------------
# Event effects (tagged variants)
# -------------------------


@dataclass(frozen=True)
class ProductionMultiplier:
    magnitude: float
    include_click: bool = False


@dataclass(frozen=True)
class ClickMultiplier:
    magnitude: float


@dataclass(frozen=True)
class InstantGrant:
    """Grant `seconds_of_production` worth of current per-second production once."""
    seconds_of_production: float


EventEffect = Union[ProductionMultiplier, ClickMultiplier, InstantGrant]


@dataclass(frozen=True)
class EventDefinition:
    id: str
    title: str
    description: str
    effect: EventEffect
    weight: float = 1.0


DEFAULT_EVENTS: Tuple[EventDefinition, ...] = (
    EventDefinition(
        id="solar-flare",
        title="Solar Flare",
        description="All production doubled for one minute.",
        effect=ProductionMultiplier(magnitude=2.0, include_click=True),
        weight=0.4,
    ),
    EventDefinition(
        id="seed-rain",
        title="Seed Rain",
        description="Clicks grant triple biomass for one minute.",
        effect=ClickMultiplier(magnitude=3.0),
        weight=0.4,
    ),
    EventDefinition(
        id="time-rift",
        title="Time Rift",
        description="Instantly gain 60 seconds of passive production.",
        effect=InstantGrant(seconds_of_production=60.0),
        weight=0.2,
    ),
)
