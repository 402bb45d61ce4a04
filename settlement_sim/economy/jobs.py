"""Worker assignment: assign, unassign and trimming after population loss."""

from __future__ import annotations

from settlement_sim.core.kinds import TRIM_ORDER, JobKind
from settlement_sim.core.state import SettlementState


def assign(state: SettlementState, job: JobKind, count: int = 1) -> bool:
    """Move *count* people onto *job*. Returns False (state untouched) if not allowed."""
    if count <= 0:
        return False
    if not state.is_unlocked(job):
        return False

    if job is JobKind.UNEMPLOYED:
        if state.total_assigned() + count > state.population:
            return False
    elif state.assigned_workers() + count > state.population:
        return False

    state.jobs_assigned[job] = state.jobs_assigned.get(job, 0) + count
    state.sync_unemployed()
    return True


def unassign(state: SettlementState, job: JobKind, count: int = 1) -> None:
    """Take up to *count* people off *job*; they become unemployed."""
    if count > 0:
        state.jobs_assigned[job] = max(0, state.jobs_assigned.get(job, 0) - count)
    state.sync_unemployed()


def trim_jobs(state: SettlementState) -> dict[JobKind, int]:
    """Remove workers one at a time until assignments fit the population.

    Lumberjacks go first, farmers last, so food production survives the
    shortage that usually caused the loss. Returns how many were removed per job.
    """
    removed: dict[JobKind, int] = {}
    while state.total_assigned() > state.population:
        for job in TRIM_ORDER:
            if state.jobs_assigned.get(job, 0) > 0:
                state.jobs_assigned[job] -= 1
                removed[job] = removed.get(job, 0) + 1
                break
        else:
            break
    return removed
