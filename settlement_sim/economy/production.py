"""Percentage boosts and flat yields derived from buildings and upgrades."""

from __future__ import annotations

from settlement_sim.core.kinds import STORABLE_RESOURCES, ResourceKind
from settlement_sim.core.state import SettlementState
from settlement_sim.economy.catalog import BUILDINGS, UPGRADES, JobBoost


def compute_boosts(state: SettlementState) -> dict[ResourceKind, float]:
    """Additive percentage boost to job output, per resource."""
    boosts = {r: 0.0 for r in STORABLE_RESOURCES}
    for kind, count in state.buildings.items():
        if not count:
            continue
        for resource, percent in BUILDINGS[kind].percent_boost.items():
            boosts[resource] += percent * count

    for kind, level in state.upgrades_purchased.items():
        if not level:
            continue
        for effect in UPGRADES[kind].effects:
            if isinstance(effect, JobBoost):
                boosts[effect.resource] += effect.percent_per_level * level
    return boosts


def compute_flat_yields_per_second(state: SettlementState) -> dict[ResourceKind, float]:
    """Worker-independent production per second, per resource."""
    flat = {r: 0.0 for r in STORABLE_RESOURCES}
    for kind, count in state.buildings.items():
        if not count:
            continue
        for resource, amount in BUILDINGS[kind].flat_yield.items():
            flat[resource] += amount * count
    return flat
