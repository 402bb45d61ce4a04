"""The single mutable aggregate describing one settlement."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from settlement_sim.core.config import (
    STARTING_HOUSES,
    STARTING_RESOURCES,
    STARTING_STORAGE,
)
from settlement_sim.core.kinds import (
    STORABLE_RESOURCES,
    WORKER_JOBS,
    BuildingKind,
    JobKind,
    ResourceKind,
    UpgradeKind,
)
from settlement_sim.simulation.events import EventLog


@dataclass
class SettlementState:
    """Resources, buildings, workers and bookkeeping for one settlement.

    ``resource_base_max`` holds the ceilings contributed by the starting
    storage and constructed storage rooms only; ``resource_max`` is derived
    from it every tick so upgrade bonuses never compound.
    """

    resources: dict[ResourceKind, float] = field(default_factory=dict)
    resource_max: dict[ResourceKind, float] = field(default_factory=dict)
    resource_base_max: dict[ResourceKind, float] = field(default_factory=dict)
    buildings: dict[BuildingKind, int] = field(default_factory=dict)
    jobs_assigned: dict[JobKind, int] = field(default_factory=dict)
    unlocked_jobs: dict[JobKind, bool] = field(default_factory=dict)
    population: int = 0
    pop_accumulator: float = 0.0
    upgrades_purchased: dict[UpgradeKind, int] = field(default_factory=dict)
    events: EventLog = field(default_factory=EventLog)
    ticks: int = 0

    def assigned_workers(self) -> int:
        """Workers on every job except unemployed."""
        return sum(self.jobs_assigned.get(job, 0) for job in WORKER_JOBS)

    def total_assigned(self) -> int:
        return self.assigned_workers() + self.jobs_assigned.get(JobKind.UNEMPLOYED, 0)

    def sync_unemployed(self) -> None:
        self.jobs_assigned[JobKind.UNEMPLOYED] = max(0, self.population - self.assigned_workers())

    def is_unlocked(self, job: JobKind) -> bool:
        if job is JobKind.UNEMPLOYED:
            return True
        return self.unlocked_jobs.get(job, False)

    def copy(self) -> "SettlementState":
        return copy.deepcopy(self)


def create_initial_state() -> SettlementState:
    """Seed configuration: one house, nobody living in it yet."""
    base_max = {r: STARTING_STORAGE[r.value] for r in STORABLE_RESOURCES}
    resource_max = dict(base_max)
    resource_max[ResourceKind.POPULATION] = 0.0  # computed from houses
    return SettlementState(
        resources={r: STARTING_RESOURCES[r.value] for r in ResourceKind},
        resource_max=resource_max,
        resource_base_max=base_max,
        buildings={b: (STARTING_HOUSES if b is BuildingKind.HOUSE else 0) for b in BuildingKind},
        jobs_assigned={j: 0 for j in JobKind},
        unlocked_jobs={j: False for j in WORKER_JOBS},
        upgrades_purchased={u: 0 for u in UpgradeKind},
    )
