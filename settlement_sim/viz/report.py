"""Post-run static plots of collected metrics."""

from __future__ import annotations

import os

import matplotlib
matplotlib.use("Agg")  # files only, no window
import matplotlib.pyplot as plt

from settlement_sim.core.kinds import STORABLE_RESOURCES, WORKER_JOBS, JobKind

_RESOURCE_COLORS = {"wood": "tab:brown", "stone": "tab:gray", "food": "tab:green"}


def save_report(metrics: "MetricsCollector", output_dir: str) -> list[str]:  # noqa: F821
    """Plot population, storage and workers over time. Returns the written paths."""
    os.makedirs(output_dir, exist_ok=True)

    snapshots = metrics.snapshots
    if not snapshots:
        return []

    seconds = [s.seconds for s in snapshots]
    paths: list[str] = []

    # Population against capacity
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(seconds, [s.population for s in snapshots], "b-", linewidth=2, label="Population")
    ax.step(seconds, [s.capacity for s in snapshots], "r--", alpha=0.6, where="post", label="Capacity")
    ax.set_title("Population Over Time")
    ax.set_xlabel("Seconds")
    ax.set_ylabel("Inhabitants")
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)
    paths.append(os.path.join(output_dir, "population.png"))
    fig.savefig(paths[-1], dpi=150)
    plt.close(fig)

    # Stored resources against their ceilings
    fig, axes = plt.subplots(1, len(STORABLE_RESOURCES), figsize=(18, 5), sharex=True)
    for ax, resource in zip(axes, STORABLE_RESOURCES):
        name = resource.value
        color = _RESOURCE_COLORS.get(name)
        ax.plot(seconds, [s.resources[name] for s in snapshots], color=color, linewidth=1.5)
        ax.step(seconds, [s.ceilings[name] for s in snapshots], "k--", alpha=0.4, where="post")
        ax.set_title(name.title())
        ax.set_xlabel("Seconds")
        ax.grid(True, alpha=0.3)
    axes[0].set_ylabel("Stored")
    fig.suptitle("Storage Over Time")
    fig.tight_layout()
    paths.append(os.path.join(output_dir, "storage.png"))
    fig.savefig(paths[-1], dpi=150)
    plt.close(fig)

    # Workers by job
    fig, ax = plt.subplots(figsize=(10, 5))
    jobs = (*WORKER_JOBS, JobKind.UNEMPLOYED)
    ax.stackplot(
        seconds,
        *[[s.jobs[job.value] for s in snapshots] for job in jobs],
        labels=[job.value for job in jobs],
        alpha=0.8,
    )
    ax.set_title("Workers by Job")
    ax.set_xlabel("Seconds")
    ax.set_ylabel("Workers")
    ax.legend(fontsize=8, loc="upper left")
    ax.grid(True, alpha=0.3)
    paths.append(os.path.join(output_dir, "workers.png"))
    fig.savefig(paths[-1], dpi=150)
    plt.close(fig)

    return paths
