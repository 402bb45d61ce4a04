"""Tests for the command surface."""

import time
from unittest.mock import Mock

from settlement_sim.core.kinds import BuildingKind, JobKind, ResourceKind, UpgradeKind
from settlement_sim.simulation.settlement import Settlement


def test_build_house_unaffordable_changes_nothing(settlement):
    settlement.state.resources[ResourceKind.WOOD] = 5.0
    before = dict(settlement.state.resources)
    callback = Mock()
    settlement.subscribe(callback)

    assert not settlement.build(BuildingKind.HOUSE)

    assert settlement.state.buildings[BuildingKind.HOUSE] == 1
    assert settlement.state.resources == before
    callback.assert_not_called()


def test_build_fields_pays_unlocks_and_logs(settlement):
    callback = Mock()
    settlement.subscribe(callback)

    assert settlement.build(BuildingKind.FIELDS)

    s = settlement.state
    assert s.buildings[BuildingKind.FIELDS] == 1
    assert s.resources[ResourceKind.WOOD] == 92
    assert s.resources[ResourceKind.STONE] == 96
    assert s.resources[ResourceKind.FOOD] == 100
    assert s.unlocked_jobs[JobKind.FARMER]
    assert "Built Fields (total: 1)" in s.events.latest()
    callback.assert_called_once_with(s)


def test_build_storage_raises_base_ceiling_once(settlement):
    assert settlement.build(BuildingKind.STORAGE)
    s = settlement.state
    assert s.resource_base_max[ResourceKind.WOOD] == 250
    assert s.resource_max[ResourceKind.FOOD] == 250
    settlement.tick()
    assert s.resource_max[ResourceKind.FOOD] == 250


def test_house_raises_population_ceiling(settlement):
    assert settlement.build(BuildingKind.HOUSE)
    assert settlement.state.resource_max[ResourceKind.POPULATION] == 10


def test_unlock_survives_further_builds(settlement):
    settlement.build(BuildingKind.FORESTER)
    settlement.build(BuildingKind.FORESTER)
    assert settlement.state.unlocked_jobs[JobKind.LUMBERJACK]


def test_buy_upgrade_stops_at_maximum(settlement):
    assert settlement.buy_upgrade(UpgradeKind.LOFTED_HOUSES)
    assert not settlement.buy_upgrade(UpgradeKind.LOFTED_HOUSES)
    assert settlement.state.upgrades_purchased[UpgradeKind.LOFTED_HOUSES] == 1
    assert settlement.state.resource_max[ResourceKind.POPULATION] == 7


def test_buy_upgrade_unaffordable_changes_nothing(settlement):
    settlement.state.resources[ResourceKind.STONE] = 10.0
    before = dict(settlement.state.resources)

    assert not settlement.buy_upgrade(UpgradeKind.IRON_PICKS)

    assert settlement.state.upgrades_purchased[UpgradeKind.IRON_PICKS] == 0
    assert settlement.state.resources == before


def test_shelving_after_storage_rooms(settlement):
    settlement.build(BuildingKind.STORAGE)
    settlement.state.resources[ResourceKind.WOOD] = 200.0
    settlement.state.resources[ResourceKind.STONE] = 200.0
    assert settlement.buy_upgrade(UpgradeKind.SHELVING)
    assert settlement.state.resource_max[ResourceKind.WOOD] == 275
    for _ in range(10):
        settlement.tick()
    assert settlement.state.resource_max[ResourceKind.WOOD] == 275


def test_manual_gather_clamps_at_ceiling(settlement):
    settlement.state.resources[ResourceKind.WOOD] = 195.0
    assert settlement.manual_gather(ResourceKind.WOOD, 10) == 5
    assert settlement.state.resources[ResourceKind.WOOD] == 200


def test_manual_gather_ignores_population(settlement):
    callback = Mock()
    settlement.subscribe(callback)

    assert settlement.manual_gather(ResourceKind.POPULATION, 3) == 0.0

    assert settlement.state.population == 0
    callback.assert_not_called()


def test_assign_notifies_only_on_success(settlement):
    callback = Mock()
    settlement.subscribe(callback)
    settlement.state.population = 2
    settlement.state.sync_unemployed()

    assert not settlement.assign(JobKind.FARMER, 1)
    callback.assert_not_called()

    settlement.build(BuildingKind.FIELDS)
    assert settlement.assign(JobKind.FARMER, 1)
    assert callback.call_count == 2


def test_unsubscribe(settlement):
    callback = Mock()
    unsubscribe = settlement.subscribe(callback)
    unsubscribe()
    settlement.tick()
    callback.assert_not_called()


def test_reset_replaces_state(settlement):
    settlement.build(BuildingKind.QUARRY)
    settlement.run(50)
    callback = Mock()
    settlement.subscribe(callback)

    settlement.reset()

    s = settlement.state
    assert s.ticks == 0
    assert s.buildings[BuildingKind.QUARRY] == 0
    assert s.buildings[BuildingKind.HOUSE] == 1
    assert len(s.events) == 0
    callback.assert_called_once_with(s)


def test_tick_is_not_reentrant(settlement):
    results = []
    settlement.subscribe(lambda s: results.append(settlement.tick()))

    assert settlement.tick()

    assert results == [False]
    assert settlement.state.ticks == 1


def test_commands_and_ticks_keep_invariants(settlement, invariants):
    settlement.subscribe(invariants)
    settlement.build(BuildingKind.FIELDS)
    settlement.build(BuildingKind.FORESTER)
    settlement.build(BuildingKind.HOUSE)
    for _ in range(400):
        settlement.tick()
        pop = settlement.state.population
        settlement.assign(JobKind.FARMER, 1)
        settlement.assign(JobKind.LUMBERJACK, 1)
        if pop and settlement.state.ticks % 50 == 0:
            settlement.unassign(JobKind.FARMER, 1)
    assert invariants.calls > 400
    assert settlement.state.population > 0


def test_start_and_stop_are_idempotent():
    settlement = Settlement(ticks_per_second=200)
    settlement.start()
    settlement.start()
    assert settlement.running
    time.sleep(0.1)

    settlement.stop()
    settlement.stop()

    assert not settlement.running
    ticks = settlement.state.ticks
    assert ticks > 0
    time.sleep(0.05)
    assert settlement.state.ticks == ticks
