"""Price of the next building or upgrade, and affordability checks."""

from __future__ import annotations

import math
from typing import Mapping

from settlement_sim.core.kinds import STORABLE_RESOURCES, BuildingKind, ResourceKind, UpgradeKind
from settlement_sim.core.state import SettlementState
from settlement_sim.economy.catalog import BUILDINGS, UPGRADES


def scaled_cost(
    owned: int,
    base_cost: Mapping[ResourceKind, float],
    cost_percent: float,
    cost_flat: float = 0.0,
    flat_only_if_base: bool = True,
) -> dict[ResourceKind, int]:
    """floor(base * (1 + cost_percent) ** owned + cost_flat * owned) per resource.

    With *flat_only_if_base* (the policy used by every building) a resource
    missing from *base_cost* costs nothing at all. Without it the flat term is
    charged on every storable resource.
    """
    cost: dict[ResourceKind, int] = {}
    growth = (1 + cost_percent) ** owned
    for resource in STORABLE_RESOURCES:
        base = base_cost.get(resource, 0)
        if base > 0:
            cost[resource] = math.floor(base * growth + cost_flat * owned)
        elif not flat_only_if_base and cost_flat > 0 and owned > 0:
            cost[resource] = math.floor(cost_flat * owned)
    return cost


def upgrade_scaled_cost(
    purchased: int,
    base_cost: Mapping[ResourceKind, float],
    multiplier: float,
) -> dict[ResourceKind, int]:
    """floor(base * multiplier ** purchased) per resource with a positive base."""
    factor = multiplier ** purchased
    return {
        resource: math.floor(base_cost[resource] * factor)
        for resource in STORABLE_RESOURCES
        if base_cost.get(resource, 0) > 0
    }


def building_cost(state: SettlementState, kind: BuildingKind) -> dict[ResourceKind, int]:
    spec = BUILDINGS[kind]
    return scaled_cost(
        state.buildings.get(kind, 0),
        spec.base_cost,
        spec.cost_percent,
        spec.cost_flat,
    )


def upgrade_cost(state: SettlementState, kind: UpgradeKind) -> dict[ResourceKind, int]:
    spec = UPGRADES[kind]
    return upgrade_scaled_cost(
        state.upgrades_purchased.get(kind, 0),
        spec.base_cost,
        spec.cost_multiplier,
    )


def can_afford(state: SettlementState, cost: Mapping[ResourceKind, float]) -> bool:
    return all(state.resources.get(r, 0.0) >= amount for r, amount in cost.items())


def exceeds_storage(state: SettlementState, cost: Mapping[ResourceKind, float]) -> bool:
    """True when some part of *cost* is more than the settlement can ever hold."""
    return any(
        amount > state.resource_max.get(r, 0.0)
        for r, amount in cost.items()
        if r is not ResourceKind.POPULATION
    )


def pay(state: SettlementState, cost: Mapping[ResourceKind, float]) -> None:
    for resource, amount in cost.items():
        state.resources[resource] = max(0.0, state.resources.get(resource, 0.0) - amount)
