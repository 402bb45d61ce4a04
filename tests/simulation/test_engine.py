"""Tests for the per-tick state transition."""

import pytest

from settlement_sim.core.kinds import BuildingKind, JobKind, ResourceKind
from settlement_sim.simulation.engine import TickEngine


def _workers(state, population, **jobs):
    state.population = population
    for name, count in jobs.items():
        job = JobKind(name)
        state.unlocked_jobs[job] = True
        state.jobs_assigned[job] = count
    state.sync_unemployed()


def test_tick_counter_advances(state, engine):
    engine.tick(state)
    engine.tick(state)
    assert state.ticks == 2


def test_first_tick_from_seed(state, engine):
    result = engine.tick(state)

    assert result.capacity == 5
    assert result.upkeep_per_second == 0
    assert result.net_food_per_second == 0
    assert state.pop_accumulator == pytest.approx(0.05)
    assert state.population == 0


def test_population_arrives_after_twenty_ticks(state, engine):
    for _ in range(19):
        engine.tick(state)
    assert state.population == 0
    assert len(state.events) == 0

    engine.tick(state)

    assert state.population == 1
    assert state.pop_accumulator == pytest.approx(0.0, abs=1e-9)
    assert len(state.events) == 1
    assert "Population increased by 1 (now 1)" in state.events.latest()
    assert state.jobs_assigned[JobKind.UNEMPLOYED] == 1


def test_shortage_penalizes_lumberjacks(state, engine):
    _workers(state, 2, lumberjack=2)
    state.resources[ResourceKind.FOOD] = 0.0

    result = engine.tick(state)

    assert result.shortage
    assert result.income_per_tick[ResourceKind.WOOD] == pytest.approx(0.021)
    assert state.resources[ResourceKind.WOOD] == pytest.approx(100.021)


def test_farmers_are_not_penalized(state, engine):
    _workers(state, 2, farmer=2)
    state.resources[ResourceKind.FOOD] = 0.0

    result = engine.tick(state)

    # 2 farmers * 0.5 food/s, no fields boost
    assert result.income_per_tick[ResourceKind.FOOD] == pytest.approx(0.05)
    assert state.resources[ResourceKind.FOOD] == pytest.approx(0.05 - 0.01)


def test_storage_clamps_large_flat_yield(state, engine):
    state.buildings[BuildingKind.FIELDS] = 1000
    state.resources[ResourceKind.FOOD] = 190.0

    engine.tick(state)

    assert state.resources[ResourceKind.FOOD] == 200.0


def test_surplus_adds_stepped_growth_bonus(state, engine):
    state.buildings[BuildingKind.FIELDS] = 2  # 1 food/s flat

    result = engine.tick(state)

    assert result.net_food_per_second == pytest.approx(1.0)
    assert result.growth_per_tick == pytest.approx(5 * 0.2 * 1.1 / 20)


def test_deficit_with_food_in_store_halves_growth(state, engine):
    _workers(state, 4)
    state.resources[ResourceKind.FOOD] = 50.0

    result = engine.tick(state)

    assert result.net_food_per_second == pytest.approx(-0.4)
    assert result.decline_per_tick == 0
    assert state.pop_accumulator == pytest.approx(1 * 0.2 * 0.5 / 20)


def test_starvation_declines_without_growth(state, engine):
    # Growth needs food in store and starvation needs an empty store, so they never overlap
    _workers(state, 2, lumberjack=2)
    state.resources[ResourceKind.FOOD] = 0.0

    result = engine.tick(state)

    assert result.growth_per_tick == 0
    assert result.decline_per_tick == pytest.approx(2 * 0.5 / 20)
    assert state.pop_accumulator == pytest.approx(-0.05)


def test_population_loss_trims_lumberjacks_first(state, engine):
    _workers(state, 4, lumberjack=3)
    state.unlocked_jobs[JobKind.FARMER] = True
    state.resources[ResourceKind.FOOD] = 0.0
    state.pop_accumulator = -0.99

    result = engine.tick(state)

    assert state.population == 3
    assert result.population_change == -1
    assert result.trimmed == {JobKind.LUMBERJACK: 1}
    assert state.jobs_assigned[JobKind.LUMBERJACK] == 2
    assert state.jobs_assigned[JobKind.UNEMPLOYED] == 1
    assert state.pop_accumulator == pytest.approx(-0.09)
    assert "Population decreased by 1 (now 3)" in state.events.latest()


def test_population_pinned_at_capacity(state, engine):
    state.buildings[BuildingKind.FIELDS] = 20
    _workers(state, 5)

    for _ in range(100):
        engine.tick(state)
        assert state.population == 5
        assert state.pop_accumulator == 0


def test_accumulator_overflow_stops_at_capacity(state, engine):
    _workers(state, 4)
    state.pop_accumulator = 2.5

    engine.tick(state)

    assert state.population == 5
    assert state.pop_accumulator == 0


def test_decline_floors_population_at_zero(state, engine):
    _workers(state, 1)
    state.resources[ResourceKind.FOOD] = 0.0
    state.pop_accumulator = -0.999

    for _ in range(5):
        engine.tick(state)

    assert state.population == 0
    assert abs(state.pop_accumulator) < 1
    assert state.jobs_assigned[JobKind.UNEMPLOYED] == 0


def test_accumulator_stays_below_one_over_long_run(state, engine):
    state.buildings[BuildingKind.HOUSE] = 10
    state.buildings[BuildingKind.FIELDS] = 10
    for _ in range(2000):
        engine.tick(state)
        assert abs(state.pop_accumulator) < 1
        assert state.population <= 50
    assert state.population == 50


def test_tick_rate_scales_income(state):
    slow = TickEngine(ticks_per_second=10)
    _workers(state, 2, lumberjack=2)

    result = slow.tick(state)

    assert result.income_per_tick[ResourceKind.WOOD] == pytest.approx(2 * 0.3 / 10)
