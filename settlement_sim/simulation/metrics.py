"""Time-series collection, rates and export."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from settlement_sim.core.config import METRICS_SAMPLE_INTERVAL, TICKS_PER_SECOND
from settlement_sim.core.kinds import STORABLE_RESOURCES, WORKER_JOBS, BuildingKind, JobKind, ResourceKind


@dataclass
class TickSnapshot:
    """A snapshot of settlement state at one sampled tick."""

    tick: int = 0
    seconds: float = 0.0
    population: int = 0
    capacity: int = 0
    resources: dict[str, float] = field(default_factory=dict)
    ceilings: dict[str, float] = field(default_factory=dict)
    jobs: dict[str, int] = field(default_factory=dict)
    buildings: dict[str, int] = field(default_factory=dict)
    net_food_per_second: float = 0.0
    shortage: bool = False


class MetricsCollector:
    """Samples the settlement every *sample_interval* ticks."""

    def __init__(
        self,
        sample_interval: int = METRICS_SAMPLE_INTERVAL,
        ticks_per_second: int = TICKS_PER_SECOND,
    ) -> None:
        self.sample_interval = max(1, sample_interval)
        self.ticks_per_second = ticks_per_second
        self.snapshots: list[TickSnapshot] = []
        self._shortage_ticks: int = 0
        self._births: int = 0
        self._deaths: int = 0

    def record(self, state: "SettlementState", result: "TickResult") -> Optional[TickSnapshot]:  # noqa: F821
        """Count this tick and take a snapshot if it falls on the interval."""
        if result.shortage:
            self._shortage_ticks += 1
        if result.population_change > 0:
            self._births += result.population_change
        else:
            self._deaths -= result.population_change

        if state.ticks % self.sample_interval != 0:
            return None

        snapshot = TickSnapshot(
            tick=state.ticks,
            seconds=state.ticks / self.ticks_per_second,
            population=state.population,
            capacity=result.capacity,
            resources={r.value: state.resources.get(r, 0.0) for r in STORABLE_RESOURCES},
            ceilings={r.value: state.resource_max.get(r, 0.0) for r in STORABLE_RESOURCES},
            jobs={j.value: state.jobs_assigned.get(j, 0) for j in JobKind},
            buildings={b.value: state.buildings.get(b, 0) for b in BuildingKind},
            net_food_per_second=result.net_food_per_second,
            shortage=result.shortage,
        )
        self.snapshots.append(snapshot)
        return snapshot

    def series(self, resource: ResourceKind) -> np.ndarray:
        """Stored amount of *resource* at every snapshot."""
        if resource is ResourceKind.POPULATION:
            return np.array([s.population for s in self.snapshots], dtype=float)
        return np.array([s.resources.get(resource.value, 0.0) for s in self.snapshots], dtype=float)

    def resource_rates(self) -> dict[str, float]:
        """Average change per simulated second over the whole run, per resource."""
        if len(self.snapshots) < 2:
            return {r.value: 0.0 for r in ResourceKind}
        seconds = np.array([s.seconds for s in self.snapshots])
        span = seconds[-1] - seconds[0]
        rates: dict[str, float] = {}
        for resource in ResourceKind:
            values = self.series(resource)
            rates[resource.value] = float((values[-1] - values[0]) / span) if span > 0 else 0.0
        return rates

    def saturation(self) -> dict[str, float]:
        """Fraction of snapshots where a resource sat at its ceiling."""
        if not self.snapshots:
            return {r.value: 0.0 for r in STORABLE_RESOURCES}
        result: dict[str, float] = {}
        for resource in STORABLE_RESOURCES:
            values = self.series(resource)
            ceilings = np.array([s.ceilings.get(resource.value, 0.0) for s in self.snapshots])
            result[resource.value] = float(np.mean(np.isclose(values, ceilings)))
        return result

    def export_csv(self, filepath: str) -> None:
        """Export all snapshots to CSV."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["tick", "seconds", "population", "capacity"]
                + [r.value for r in STORABLE_RESOURCES]
                + [f"{r.value}_max" for r in STORABLE_RESOURCES]
                + [j.value for j in JobKind]
                + ["net_food_per_second", "shortage"]
            )
            for s in self.snapshots:
                writer.writerow(
                    [s.tick, f"{s.seconds:.2f}", s.population, s.capacity]
                    + [f"{s.resources[r.value]:.2f}" for r in STORABLE_RESOURCES]
                    + [f"{s.ceilings[r.value]:.0f}" for r in STORABLE_RESOURCES]
                    + [s.jobs[j.value] for j in JobKind]
                    + [f"{s.net_food_per_second:.3f}", int(s.shortage)]
                )

    def summary_report(self) -> str:
        """Generate a human-readable summary of the run."""
        if not self.snapshots:
            return "No data available."

        first = self.snapshots[0]
        last = self.snapshots[-1]
        rates = self.resource_rates()
        saturation = self.saturation()
        peak_pop = int(self.series(ResourceKind.POPULATION).max())

        lines = [
            f"=== Settlement Summary: {first.seconds:.0f}s to {last.seconds:.0f}s ===",
            f"Ticks: {last.tick} ({self._shortage_ticks} with an empty food store)",
            f"",
            f"Population: {first.population} -> {last.population} (peak {peak_pop}, capacity {last.capacity})",
            f"  Arrivals: {self._births}",
            f"  Losses: {self._deaths}",
            f"",
            f"Resources (final / ceiling, avg change per second, time at ceiling):",
        ]
        for resource in STORABLE_RESOURCES:
            name = resource.value
            lines.append(
                f"  {name}: {last.resources[name]:.1f} / {last.ceilings[name]:.0f}, "
                f"{rates[name]:+.3f}/s, {saturation[name]:.0%}"
            )

        lines.append(f"")
        lines.append(f"Workers (final):")
        for job in (*WORKER_JOBS, JobKind.UNEMPLOYED):
            lines.append(f"  {job.value}: {last.jobs[job.value]}")

        lines.append(f"")
        lines.append(f"Buildings (final):")
        for name, count in last.buildings.items():
            if count:
                lines.append(f"  {name}: {count}")

        return "\n".join(lines)
