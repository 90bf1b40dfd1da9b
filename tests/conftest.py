from __future__ import annotations

from dataclasses import replace

import pytest

from core.balance import BalanceSpec, get_balance_spec
from core.progression import recalculate_production
from core.state import NumericState


@pytest.fixture
def spec() -> BalanceSpec:
    return get_balance_spec("standard")


@pytest.fixture
def eager_spec(spec: BalanceSpec) -> BalanceSpec:
    """Every scheduling check rolls and succeeds."""
    return replace(spec, event_chance=1.0, event_check_interval=0.0)


@pytest.fixture
def make_state(spec: BalanceSpec):
    def _make(**fields) -> NumericState:
        return recalculate_production(NumericState(**fields), balance=spec)
    return _make
