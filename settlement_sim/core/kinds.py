"""Closed sets of resource, building, job and upgrade kinds."""

from __future__ import annotations

from enum import Enum


class ResourceKind(Enum):
    POPULATION = "population"
    STONE = "stone"
    WOOD = "wood"
    FOOD = "food"


class BuildingKind(Enum):
    HOUSE = "house"
    STORAGE = "storage"
    FORESTER = "forester"
    QUARRY = "quarry"
    FIELDS = "fields"


class JobKind(Enum):
    UNEMPLOYED = "unemployed"
    FARMER = "farmer"
    LUMBERJACK = "lumberjack"
    STONEMASON = "stonemason"


class UpgradeKind(Enum):
    SHARPER_AXES = "sharper_axes"
    IRON_PICKS = "iron_picks"
    CROP_ROTATION = "crop_rotation"
    SHELVING = "shelving"
    LOFTED_HOUSES = "lofted_houses"


# Resources held in storage (population is derived from houses)
STORABLE_RESOURCES: tuple[ResourceKind, ...] = (
    ResourceKind.WOOD,
    ResourceKind.STONE,
    ResourceKind.FOOD,
)

WORKER_JOBS: tuple[JobKind, ...] = (
    JobKind.FARMER,
    JobKind.LUMBERJACK,
    JobKind.STONEMASON,
)

# The single resource each worker job produces
JOB_OUTPUT: dict[JobKind, ResourceKind] = {
    JobKind.FARMER: ResourceKind.FOOD,
    JobKind.LUMBERJACK: ResourceKind.WOOD,
    JobKind.STONEMASON: ResourceKind.STONE,
}

# Workers are removed in this order when population falls
TRIM_ORDER: tuple[JobKind, ...] = (
    JobKind.LUMBERJACK,
    JobKind.STONEMASON,
    JobKind.FARMER,
    JobKind.UNEMPLOYED,
)


def job_for_resource(resource: ResourceKind) -> JobKind | None:
    """Return the worker job producing *resource*, or None."""
    for job, output in JOB_OUTPUT.items():
        if output is resource:
            return job
    return None
