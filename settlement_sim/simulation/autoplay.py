"""Greedy heuristic player that drives a Settlement through its commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from settlement_sim.core.config import (
    AUTOPLAY_DECISION_INTERVAL,
    AUTOPLAY_FARMER_SHARE,
    AUTOPLAY_STORAGE_HEADROOM,
    MANUAL_GATHER_AMOUNT,
)
from settlement_sim.core.kinds import (
    STORABLE_RESOURCES,
    WORKER_JOBS,
    BuildingKind,
    JobKind,
    UpgradeKind,
    job_for_resource,
)
from settlement_sim.economy.capacity import population_capacity
from settlement_sim.economy.catalog import BUILDINGS, UPGRADES
from settlement_sim.economy.costs import building_cost, can_afford, exceeds_storage, upgrade_cost

# Buildings that unlock a job are bought first, food before materials
_UNLOCK_ORDER: tuple[BuildingKind, ...] = (
    BuildingKind.FIELDS,
    BuildingKind.FORESTER,
    BuildingKind.QUARRY,
)


@dataclass
class AutoPlayer:
    """Satisficing policy: one construction, one upgrade and a worker rebalance per decision."""

    farmer_share: float = AUTOPLAY_FARMER_SHARE
    decision_interval: int = AUTOPLAY_DECISION_INTERVAL
    actions: list[str] = field(default_factory=list)

    def __call__(self, settlement: "Settlement") -> None:  # noqa: F821
        if settlement.state.ticks % self.decision_interval == 0:
            self.step(settlement)

    def step(self, settlement: "Settlement") -> list[str]:  # noqa: F821
        """Make one round of decisions. Returns the actions taken."""
        taken: list[str] = []
        self._gather(settlement, taken)

        choice = self._pick_building(settlement)
        if choice is not None and settlement.build(choice):
            taken.append(f"build {choice.value}")

        upgrade = self._pick_upgrade(settlement)
        if upgrade is not None and settlement.buy_upgrade(upgrade):
            taken.append(f"upgrade {upgrade.value}")

        self._rebalance(settlement, taken)
        self.actions.extend(taken)
        return taken

    # ------------------------------------------------------------------

    def _gather(self, settlement, taken: list[str]) -> None:
        state = settlement.state
        for resource in STORABLE_RESOURCES:
            job = job_for_resource(resource)
            if job is not None and state.is_unlocked(job):
                continue
            if settlement.manual_gather(resource, MANUAL_GATHER_AMOUNT) > 0:
                taken.append(f"gather {resource.value}")

    def _pick_building(self, settlement) -> BuildingKind | None:
        state = settlement.state

        for kind in _UNLOCK_ORDER:
            if state.buildings.get(kind, 0) == 0:
                return kind if can_afford(state, building_cost(state, kind)) else None

        # Storage once anything costs close to what we can hold
        for kind in BuildingKind:
            cost = building_cost(state, kind)
            headroom = {r: amount / AUTOPLAY_STORAGE_HEADROOM for r, amount in cost.items()}
            if kind is not BuildingKind.STORAGE and exceeds_storage(state, headroom):
                storage_cost = building_cost(state, BuildingKind.STORAGE)
                return BuildingKind.STORAGE if can_afford(state, storage_cost) else None

        if state.population >= population_capacity(state):
            house_cost = building_cost(state, BuildingKind.HOUSE)
            return BuildingKind.HOUSE if can_afford(state, house_cost) else None

        affordable = [
            (sum(building_cost(state, kind).values()), kind.value, kind)
            for kind in BUILDINGS
            if can_afford(state, building_cost(state, kind))
        ]
        if not affordable:
            return None
        return min(affordable)[2]

    def _pick_upgrade(self, settlement) -> UpgradeKind | None:
        state = settlement.state
        options = []
        for kind, spec in UPGRADES.items():
            if state.upgrades_purchased.get(kind, 0) >= spec.max_purchases:
                continue
            cost = upgrade_cost(state, kind)
            if can_afford(state, cost):
                options.append((sum(cost.values()), kind.value, kind))
        if not options:
            return None
        return min(options)[2]

    def desired_workers(self, state: "SettlementState") -> dict[JobKind, int]:  # noqa: F821
        """Target head count per worker job for the current population."""
        desired = {job: 0 for job in WORKER_JOBS}
        remaining = state.population
        if state.is_unlocked(JobKind.FARMER):
            desired[JobKind.FARMER] = min(remaining, round(self.farmer_share * state.population))
            remaining -= desired[JobKind.FARMER]

        others = [j for j in (JobKind.LUMBERJACK, JobKind.STONEMASON) if state.is_unlocked(j)]
        if not others and state.is_unlocked(JobKind.FARMER):
            desired[JobKind.FARMER] += remaining
            remaining = 0
        for i, job in enumerate(others):
            share = remaining // len(others) + (1 if i < remaining % len(others) else 0)
            desired[job] = share
        return desired

    def _rebalance(self, settlement, taken: list[str]) -> None:
        state = settlement.state
        desired = self.desired_workers(state)
        for job, target in desired.items():
            current = state.jobs_assigned.get(job, 0)
            if current > target:
                settlement.unassign(job, current - target)
                taken.append(f"unassign {current - target} {job.value}")
        for job, target in desired.items():
            current = state.jobs_assigned.get(job, 0)
            if target > current and settlement.assign(job, target - current):
                taken.append(f"assign {target - current} {job.value}")
