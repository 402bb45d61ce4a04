"""Population capacity, storage ceilings and food upkeep rate."""

from __future__ import annotations

from settlement_sim.core.config import FOOD_PER_POP_PER_SECOND
from settlement_sim.core.kinds import STORABLE_RESOURCES, BuildingKind, ResourceKind
from settlement_sim.core.state import SettlementState
from settlement_sim.economy.catalog import (
    BUILDINGS,
    UPGRADES,
    PopulationPerHouse,
    StoragePerRoom,
    UpkeepSurcharge,
)


def _upgrade_effects(state: SettlementState, effect_type: type):
    """Yield (effect, level) for every purchased effect of *effect_type*."""
    for kind, level in state.upgrades_purchased.items():
        if not level:
            continue
        for effect in UPGRADES[kind].effects:
            if isinstance(effect, effect_type):
                yield effect, level


def capacity_per_house(state: SettlementState) -> int:
    per_house = BUILDINGS[BuildingKind.HOUSE].pop_capacity_per
    for effect, _level in _upgrade_effects(state, PopulationPerHouse):
        per_house += effect.amount
    return per_house


def population_capacity(state: SettlementState) -> int:
    return state.buildings.get(BuildingKind.HOUSE, 0) * capacity_per_house(state)


def extra_capacity_per_room(state: SettlementState) -> float:
    return sum(effect.amount_per_level * level for effect, level in _upgrade_effects(state, StoragePerRoom))


def storage_ceiling(state: SettlementState) -> dict[ResourceKind, float]:
    """Base ceiling from built storage plus the per-room upgrade bonus, recomputed fresh."""
    rooms = state.buildings.get(BuildingKind.STORAGE, 0)
    bonus = rooms * extra_capacity_per_room(state)
    return {r: state.resource_base_max.get(r, 0.0) + bonus for r in STORABLE_RESOURCES}


def food_upkeep_per_pop_per_second(state: SettlementState) -> float:
    surcharge = sum(effect.percent for effect, _level in _upgrade_effects(state, UpkeepSurcharge))
    return FOOD_PER_POP_PER_SECOND * (1 + surcharge)


def refresh_ceilings(state: SettlementState) -> int:
    """Write current population and storage ceilings into ``resource_max``."""
    cap = population_capacity(state)
    state.resource_max[ResourceKind.POPULATION] = float(cap)
    state.resource_max.update(storage_ceiling(state))
    return cap
