"""Tick engine: the fixed-order state transition applied on every timer tick."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from settlement_sim.core.config import (
    DECLINE_UPKEEP_RATIO,
    GROWTH_BONUS_MAX_STEPS,
    GROWTH_BONUS_PER_STEP,
    GROWTH_DEFICIT_FACTOR,
    GROWTH_SURPLUS_STEP,
    JOB_BASE_INCOME_PER_SECOND,
    POPULATION_DECLINE_RATE,
    POPULATION_GROWTH_RATE,
    POP_ACCUMULATOR_EPSILON,
    SHORTAGE_MULTIPLIER,
    TICKS_PER_SECOND,
)
from settlement_sim.core.kinds import (
    JOB_OUTPUT,
    STORABLE_RESOURCES,
    JobKind,
    ResourceKind,
)
from settlement_sim.core.state import SettlementState
from settlement_sim.economy.capacity import (
    food_upkeep_per_pop_per_second,
    population_capacity,
    storage_ceiling,
)
from settlement_sim.economy.jobs import trim_jobs
from settlement_sim.economy.production import compute_boosts, compute_flat_yields_per_second
from settlement_sim.viz.logger import SimLogger


@dataclass
class TickResult:
    """What one tick computed, for metrics and inspection."""

    tick: int
    capacity: int
    ceilings: dict[ResourceKind, float]
    boosts: dict[ResourceKind, float]
    income_per_tick: dict[ResourceKind, float]
    upkeep_per_second: float
    net_food_per_second: float
    shortage: bool
    growth_per_tick: float = 0.0
    decline_per_tick: float = 0.0
    population_change: int = 0
    trimmed: dict[JobKind, int] = field(default_factory=dict)


class TickEngine:
    """Applies one simulation step to a SettlementState.

    The engine is stateless apart from its tick rate and the logger; all
    mutable data lives in the state passed to :meth:`tick`.
    """

    def __init__(self, ticks_per_second: int = TICKS_PER_SECOND, logger: Optional[SimLogger] = None) -> None:
        self.ticks_per_second = ticks_per_second
        self.logger = logger or SimLogger(verbosity=0)

    def log_event(self, state: SettlementState, category: str, text: str) -> None:
        """Record *text* in the state's event log and the structured logger."""
        state.events.record(text)
        self.logger.log(category, text, tick=state.ticks)

    def tick(self, state: SettlementState) -> TickResult:
        """One tick of simulation, in fixed order."""
        tps = self.ticks_per_second

        # 1. Advance the counter
        state.ticks += 1

        # 2. Boosts and flat yields
        boosts = compute_boosts(state)
        flat_per_second = compute_flat_yields_per_second(state)

        # 3-4. Ceilings
        capacity = population_capacity(state)
        state.resource_max[ResourceKind.POPULATION] = float(capacity)
        ceilings = storage_ceiling(state)
        state.resource_max.update(ceilings)

        # 5. Food upkeep
        upkeep_per_second = state.population * food_upkeep_per_pop_per_second(state)
        upkeep_per_tick = upkeep_per_second / tps

        # 6. Job income plus flat yields
        income = {r: flat_per_second[r] / tps for r in STORABLE_RESOURCES}
        for job, resource in JOB_OUTPUT.items():
            workers = state.jobs_assigned.get(job, 0)
            base = JOB_BASE_INCOME_PER_SECOND[job.value]
            income[resource] += workers * base * (1 + boosts[resource]) / tps

        # 7. Net food from pre-penalty income
        net_food_per_second = income[ResourceKind.FOOD] * tps - upkeep_per_second

        # 8. Shortage penalty (farmers exempt)
        shortage = state.resources.get(ResourceKind.FOOD, 0.0) <= 0
        if shortage:
            income[ResourceKind.WOOD] *= SHORTAGE_MULTIPLIER
            income[ResourceKind.STONE] *= SHORTAGE_MULTIPLIER

        # 9. Apply deltas
        food = state.resources.get(ResourceKind.FOOD, 0.0) + income[ResourceKind.FOOD] - upkeep_per_tick
        state.resources[ResourceKind.FOOD] = max(0.0, food)
        for resource in (ResourceKind.WOOD, ResourceKind.STONE):
            state.resources[resource] = max(0.0, state.resources.get(resource, 0.0) + income[resource])

        # 10. Clamp to storage
        for resource in STORABLE_RESOURCES:
            state.resources[resource] = min(state.resources[resource], ceilings[resource])

        result = TickResult(
            tick=state.ticks,
            capacity=capacity,
            ceilings=ceilings,
            boosts=boosts,
            income_per_tick=income,
            upkeep_per_second=upkeep_per_second,
            net_food_per_second=net_food_per_second,
            shortage=shortage,
        )

        # 11. Growth / decline accumulation
        self._accumulate_population(state, result)

        # 12. Integer transfer
        before = state.population
        self._transfer_population(state, capacity)
        result.population_change = state.population - before

        # 13. Trim jobs after loss
        if state.population < before:
            result.trimmed = trim_jobs(state)
            if result.trimmed:
                lost = ", ".join(f"{n} {job.value}" for job, n in result.trimmed.items())
                self.logger.log(SimLogger.JOBS, f"Workers lost: {lost}", tick=state.ticks)

        # 14. Unemployed
        state.sync_unemployed()

        # 15. Floor at zero
        for resource, amount in state.resources.items():
            if amount < 0:
                state.resources[resource] = 0.0
        state.resources[ResourceKind.POPULATION] = float(state.population)

        self.logger.flush(state.ticks)
        return result

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def _accumulate_population(self, state: SettlementState, result: TickResult) -> None:
        tps = self.ticks_per_second
        net_food = result.net_food_per_second
        food_stored = state.resources.get(ResourceKind.FOOD, 0.0)

        if food_stored > 0:
            missing = max(0, result.capacity - state.population)
            growth_per_second = missing * POPULATION_GROWTH_RATE
            if net_food < 0:
                growth_per_second *= GROWTH_DEFICIT_FACTOR
            else:
                steps = min(GROWTH_BONUS_MAX_STEPS, math.floor(net_food / GROWTH_SURPLUS_STEP))
                growth_per_second *= 1 + steps * GROWTH_BONUS_PER_STEP
            result.growth_per_tick = growth_per_second / tps
            state.pop_accumulator += result.growth_per_tick

        # Job income is never negative, so an empty store with a deficit also counts as starving
        severe = net_food < -DECLINE_UPKEEP_RATIO * result.upkeep_per_second
        starving = food_stored <= 0 and net_food < 0
        if severe or starving:
            result.decline_per_tick = state.population * POPULATION_DECLINE_RATE / tps
            state.pop_accumulator -= result.decline_per_tick

    def _transfer_population(self, state: SettlementState, capacity: int) -> None:
        eps = POP_ACCUMULATOR_EPSILON
        while state.pop_accumulator + eps >= 1:
            whole = math.floor(state.pop_accumulator + eps)
            new_pop = min(capacity, state.population + whole)
            applied = new_pop - state.population
            if applied <= 0:
                # at the cap
                state.pop_accumulator = 0.0
                break
            state.population = new_pop
            state.pop_accumulator -= applied
            self.log_event(state, SimLogger.POPULATION, f"Population increased by {applied} (now {state.population})")

        while state.pop_accumulator - eps <= -1:
            whole = math.floor(abs(state.pop_accumulator) + eps)
            new_pop = max(0, state.population - whole)
            applied = state.population - new_pop
            if applied <= 0:
                state.pop_accumulator = 0.0
                break
            state.population = new_pop
            state.pop_accumulator += applied
            self.log_event(state, SimLogger.POPULATION, f"Population decreased by {applied} (now {state.population})")

        if abs(state.pop_accumulator) < eps:
            state.pop_accumulator = 0.0
