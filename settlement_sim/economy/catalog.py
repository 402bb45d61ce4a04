"""Static definitions of buildings, jobs and upgrades."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from settlement_sim.core.kinds import BuildingKind, JobKind, ResourceKind, UpgradeKind


# =============================================================================
# Upgrade effects
# =============================================================================

@dataclass(frozen=True)
class JobBoost:
    """Percentage boost to the workers producing *resource*, per level."""

    resource: ResourceKind
    percent_per_level: float


@dataclass(frozen=True)
class StoragePerRoom:
    """Extra ceiling for every storable resource, per storage room, per level."""

    amount_per_level: float


@dataclass(frozen=True)
class PopulationPerHouse:
    """Extra inhabitants each house can hold."""

    amount: int


@dataclass(frozen=True)
class UpkeepSurcharge:
    """Percentage added to the food each inhabitant eats."""

    percent: float


UpgradeEffect = Union[JobBoost, StoragePerRoom, PopulationPerHouse, UpkeepSurcharge]


# =============================================================================
# Specs
# =============================================================================

@dataclass(frozen=True)
class BuildingSpec:
    """Constant inputs of one building kind."""

    kind: BuildingKind
    name: str
    desc: str
    base_cost: dict[ResourceKind, float]
    cost_percent: float
    cost_flat: float = 0.0
    flat_yield: dict[ResourceKind, float] = field(default_factory=dict)     # per unit per second
    percent_boost: dict[ResourceKind, float] = field(default_factory=dict)  # per unit
    unlocks_job: Optional[JobKind] = None
    storage_increase: dict[ResourceKind, float] = field(default_factory=dict)  # one-time, per unit
    pop_capacity_per: int = 0


@dataclass(frozen=True)
class JobSpec:
    kind: JobKind
    name: str
    desc: str


@dataclass(frozen=True)
class UpgradeSpec:
    """Constant inputs of one upgrade kind."""

    kind: UpgradeKind
    name: str
    desc: str
    base_cost: dict[ResourceKind, float]
    cost_multiplier: float
    max_purchases: int
    effects: tuple[UpgradeEffect, ...]


# =============================================================================
# Catalog tables
# =============================================================================

BUILDINGS: dict[BuildingKind, BuildingSpec] = {
    BuildingKind.HOUSE: BuildingSpec(
        kind=BuildingKind.HOUSE,
        name="House",
        desc="Increases maximum population.",
        base_cost={ResourceKind.WOOD: 10, ResourceKind.STONE: 5},
        cost_percent=0.15,
        cost_flat=2,
        pop_capacity_per=5,
    ),
    BuildingKind.STORAGE: BuildingSpec(
        kind=BuildingKind.STORAGE,
        name="Storage room",
        desc="Increases storage capacity for all resources.",
        base_cost={ResourceKind.WOOD: 20, ResourceKind.STONE: 10},
        cost_percent=0.12,
        cost_flat=5,
        storage_increase={
            ResourceKind.WOOD: 50,
            ResourceKind.STONE: 50,
            ResourceKind.FOOD: 50,
        },
    ),
    BuildingKind.FORESTER: BuildingSpec(
        kind=BuildingKind.FORESTER,
        name="Forester",
        desc="Improves wood gathering (adds % boost to lumberjacks).",
        base_cost={ResourceKind.WOOD: 15, ResourceKind.STONE: 8},
        cost_percent=0.15,
        cost_flat=3,
        percent_boost={ResourceKind.WOOD: 0.10},
        unlocks_job=JobKind.LUMBERJACK,
    ),
    BuildingKind.QUARRY: BuildingSpec(
        kind=BuildingKind.QUARRY,
        name="Quarry",
        desc="Improves stone gathering (adds % boost to stone masons).",
        base_cost={ResourceKind.WOOD: 12, ResourceKind.STONE: 12},
        cost_percent=0.15,
        cost_flat=3,
        percent_boost={ResourceKind.STONE: 0.10},
        unlocks_job=JobKind.STONEMASON,
    ),
    BuildingKind.FIELDS: BuildingSpec(
        kind=BuildingKind.FIELDS,
        name="Fields",
        desc="Produces food and improves farmers (flat + %).",
        base_cost={ResourceKind.WOOD: 8, ResourceKind.STONE: 4},
        cost_percent=0.12,
        cost_flat=2,
        flat_yield={ResourceKind.FOOD: 0.5},
        percent_boost={ResourceKind.FOOD: 0.05},
        unlocks_job=JobKind.FARMER,
    ),
}

JOBS: dict[JobKind, JobSpec] = {
    JobKind.UNEMPLOYED: JobSpec(JobKind.UNEMPLOYED, "Unemployed", "People without a job."),
    JobKind.FARMER: JobSpec(JobKind.FARMER, "Farmer", "Produces food. Always unaffected by food shortage."),
    JobKind.LUMBERJACK: JobSpec(JobKind.LUMBERJACK, "Lumberjack", "Gathers wood."),
    JobKind.STONEMASON: JobSpec(JobKind.STONEMASON, "Stone Mason", "Gathers stone."),
}

UPGRADES: dict[UpgradeKind, UpgradeSpec] = {
    UpgradeKind.SHARPER_AXES: UpgradeSpec(
        kind=UpgradeKind.SHARPER_AXES,
        name="Sharper axes",
        desc="Lumberjacks gather 10% more wood per level.",
        base_cost={ResourceKind.WOOD: 30, ResourceKind.STONE: 20},
        cost_multiplier=1.5,
        max_purchases=5,
        effects=(JobBoost(ResourceKind.WOOD, 0.10),),
    ),
    UpgradeKind.IRON_PICKS: UpgradeSpec(
        kind=UpgradeKind.IRON_PICKS,
        name="Iron picks",
        desc="Stone masons cut 10% more stone per level.",
        base_cost={ResourceKind.WOOD: 25, ResourceKind.STONE: 35},
        cost_multiplier=1.5,
        max_purchases=5,
        effects=(JobBoost(ResourceKind.STONE, 0.10),),
    ),
    UpgradeKind.CROP_ROTATION: UpgradeSpec(
        kind=UpgradeKind.CROP_ROTATION,
        name="Crop rotation",
        desc="Farmers harvest 10% more food per level.",
        base_cost={ResourceKind.WOOD: 20, ResourceKind.STONE: 10, ResourceKind.FOOD: 30},
        cost_multiplier=1.5,
        max_purchases=5,
        effects=(JobBoost(ResourceKind.FOOD, 0.10),),
    ),
    UpgradeKind.SHELVING: UpgradeSpec(
        kind=UpgradeKind.SHELVING,
        name="Shelving",
        desc="Each storage room holds 25 more of every resource per level.",
        base_cost={ResourceKind.WOOD: 40, ResourceKind.STONE: 40},
        cost_multiplier=1.6,
        max_purchases=3,
        effects=(StoragePerRoom(25),),
    ),
    UpgradeKind.LOFTED_HOUSES: UpgradeSpec(
        kind=UpgradeKind.LOFTED_HOUSES,
        name="Lofted houses",
        desc="Every house holds 2 more people, who eat 10% more.",
        base_cost={ResourceKind.WOOD: 80, ResourceKind.STONE: 60},
        cost_multiplier=1.0,
        max_purchases=1,
        effects=(PopulationPerHouse(2), UpkeepSurcharge(0.10)),
    ),
}

