"""Farmer-share sweep: run headless settlements across worker policies and compare."""

from __future__ import annotations

import csv
import os
import time
from dataclasses import dataclass

import numpy as np

from settlement_sim.core.config import SWEEP_SHARES, TICKS_PER_SECOND
from settlement_sim.core.kinds import BuildingKind, ResourceKind


@dataclass
class SweepResult:
    """Summary of a single run."""
    farmer_share: float
    final_population: int
    peak_population: int
    capacity: int
    wood: float
    stone: float
    food: float
    buildings: int
    houses: int
    shortage_seconds: float
    elapsed_seconds: float


def run_single(farmer_share: float, seconds: int, ticks_per_second: int = TICKS_PER_SECOND) -> SweepResult:
    """Run one autoplayed settlement and return its summary."""
    from settlement_sim.simulation.autoplay import AutoPlayer
    from settlement_sim.simulation.metrics import MetricsCollector
    from settlement_sim.simulation.settlement import Settlement

    metrics = MetricsCollector(sample_interval=ticks_per_second, ticks_per_second=ticks_per_second)
    settlement = Settlement(ticks_per_second=ticks_per_second, metrics=metrics)
    player = AutoPlayer(farmer_share=farmer_share, decision_interval=ticks_per_second)

    t0 = time.time()
    settlement.run(seconds * ticks_per_second, between_ticks=player)
    elapsed = time.time() - t0

    state = settlement.state
    population = metrics.series(ResourceKind.POPULATION)
    shortage = sum(1 for s in metrics.snapshots if s.shortage)
    return SweepResult(
        farmer_share=farmer_share,
        final_population=state.population,
        peak_population=int(population.max()) if population.size else state.population,
        capacity=int(state.resource_max[ResourceKind.POPULATION]),
        wood=state.resources[ResourceKind.WOOD],
        stone=state.resources[ResourceKind.STONE],
        food=state.resources[ResourceKind.FOOD],
        buildings=sum(state.buildings.values()),
        houses=state.buildings[BuildingKind.HOUSE],
        shortage_seconds=shortage * metrics.sample_interval / ticks_per_second,
        elapsed_seconds=elapsed,
    )


def best_result(results: list[SweepResult]) -> SweepResult:
    """Highest final population; ties go to the most buildings."""
    scores = np.array([(r.final_population, r.buildings) for r in results], dtype=float)
    order = np.lexsort((scores[:, 1], scores[:, 0]))
    return results[int(order[-1])]


def sweep(
    seconds: int = 600,
    shares: int = SWEEP_SHARES,
    ticks_per_second: int = TICKS_PER_SECOND,
    output_dir: str = "results/sweep",
) -> list[SweepResult]:
    """Run one settlement per farmer share and report aggregate stats."""
    os.makedirs(output_dir, exist_ok=True)
    grid = np.round(np.linspace(0.1, 0.9, shares), 3)

    print(f"=== Farmer Share Sweep ===")
    print(f"Runs: {len(grid)} | Seconds/run: {seconds} | Ticks/second: {ticks_per_second}")
    print()

    results: list[SweepResult] = []
    for i, share in enumerate(grid):
        result = run_single(float(share), seconds, ticks_per_second)
        results.append(result)
        print(
            f"  Run {i+1:>2}/{len(grid)} | share={share:.2f} | "
            f"pop {result.final_population:>3}/{result.capacity:<3} | "
            f"buildings={result.buildings:>3} | "
            f"food={result.food:>7.1f} | "
            f"starved {result.shortage_seconds:.0f}s | {result.elapsed_seconds:.1f}s"
        )

    populations = np.array([r.final_population for r in results], dtype=float)
    print()
    print(
        f"  Final population  mean={populations.mean():.1f}  std={populations.std():.1f}  "
        f"min={populations.min():.0f}  max={populations.max():.0f}"
    )
    best = best_result(results)
    print(f"  Best farmer share: {best.farmer_share:.2f} (population {best.final_population})")

    csv_path = os.path.join(output_dir, "sweep_results.csv")
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "farmer_share", "final_pop", "peak_pop", "capacity", "wood", "stone",
            "food", "buildings", "houses", "shortage_s", "elapsed_s",
        ])
        for r in results:
            writer.writerow([
                f"{r.farmer_share:.3f}", r.final_population, r.peak_population,
                r.capacity, f"{r.wood:.1f}", f"{r.stone:.1f}", f"{r.food:.1f}",
                r.buildings, r.houses, f"{r.shortage_seconds:.0f}",
                f"{r.elapsed_seconds:.2f}",
            ])
    print(f"\nResults exported to {csv_path}")

    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Farmer share sweep")
    parser.add_argument("--seconds", type=int, default=600, help="Simulated seconds per run")
    parser.add_argument("--shares", type=int, default=SWEEP_SHARES, help="Grid points between 0.1 and 0.9")
    parser.add_argument("--tick-rate", type=int, default=TICKS_PER_SECOND)
    parser.add_argument("--output-dir", type=str, default="results/sweep")
    args = parser.parse_args()

    sweep(
        seconds=args.seconds,
        shares=args.shares,
        ticks_per_second=args.tick_rate,
        output_dir=args.output_dir,
    )
