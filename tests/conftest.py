"""Shared fixtures for settlement tests."""

import pytest

from settlement_sim.core.kinds import STORABLE_RESOURCES, WORKER_JOBS, JobKind
from settlement_sim.core.state import create_initial_state
from settlement_sim.economy.capacity import population_capacity, refresh_ceilings
from settlement_sim.economy.catalog import UPGRADES
from settlement_sim.simulation.engine import TickEngine
from settlement_sim.simulation.settlement import Settlement


@pytest.fixture
def state():
    s = create_initial_state()
    refresh_ceilings(s)
    return s


@pytest.fixture
def engine():
    return TickEngine(ticks_per_second=20)


@pytest.fixture
def settlement():
    return Settlement(ticks_per_second=20)


class InvariantChecker:
    """Subscriber asserting the settlement invariants after every change."""

    def __init__(self):
        self.calls = 0
        self._buildings = None

    def __call__(self, s):
        self.calls += 1
        for r in STORABLE_RESOURCES:
            assert 0 <= s.resources[r] <= s.resource_max[r] + 1e-9
        assert 0 <= s.population <= population_capacity(s)
        assert s.assigned_workers() + s.jobs_assigned[JobKind.UNEMPLOYED] == s.population
        for job in WORKER_JOBS:
            if s.jobs_assigned[job] > 0:
                assert s.unlocked_jobs[job]
        if self._buildings is not None:
            for kind, count in self._buildings.items():
                assert s.buildings[kind] >= count
        self._buildings = dict(s.buildings)
        for kind, level in s.upgrades_purchased.items():
            assert level <= UPGRADES[kind].max_purchases
        assert abs(s.pop_accumulator) < 1


@pytest.fixture
def invariants():
    return InvariantChecker()
