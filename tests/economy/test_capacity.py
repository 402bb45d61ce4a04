"""Tests for population capacity, storage ceilings and upkeep."""

import pytest

from settlement_sim.core.kinds import BuildingKind, ResourceKind, UpgradeKind
from settlement_sim.economy.capacity import (
    food_upkeep_per_pop_per_second,
    population_capacity,
    refresh_ceilings,
    storage_ceiling,
)


def test_one_house_holds_five(state):
    assert population_capacity(state) == 5
    assert state.resource_max[ResourceKind.POPULATION] == 5


def test_housing_upgrade_raises_capacity_per_house(state):
    state.buildings[BuildingKind.HOUSE] = 3
    state.upgrades_purchased[UpgradeKind.LOFTED_HOUSES] = 1
    assert population_capacity(state) == 21


def test_seed_storage_ceiling(state):
    assert storage_ceiling(state) == {
        ResourceKind.WOOD: 200,
        ResourceKind.STONE: 200,
        ResourceKind.FOOD: 200,
    }


def test_shelving_bonus_is_per_room(state):
    state.buildings[BuildingKind.STORAGE] = 2
    state.resource_base_max = {r: v + 100 for r, v in state.resource_base_max.items()}
    state.upgrades_purchased[UpgradeKind.SHELVING] = 2
    # 300 base + 2 rooms * 2 levels * 25
    assert storage_ceiling(state)[ResourceKind.FOOD] == 400


def test_ceiling_does_not_compound_when_recomputed(state):
    state.buildings[BuildingKind.STORAGE] = 1
    state.resource_base_max = {r: v + 50 for r, v in state.resource_base_max.items()}
    state.upgrades_purchased[UpgradeKind.SHELVING] = 1
    for _ in range(5):
        refresh_ceilings(state)
    assert state.resource_max[ResourceKind.WOOD] == 275
    assert state.resource_base_max[ResourceKind.WOOD] == 250


def test_upkeep_surcharge(state):
    assert food_upkeep_per_pop_per_second(state) == pytest.approx(0.1)
    state.upgrades_purchased[UpgradeKind.LOFTED_HOUSES] = 1
    assert food_upkeep_per_pop_per_second(state) == pytest.approx(0.11)
