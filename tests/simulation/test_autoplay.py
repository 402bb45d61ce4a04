"""Tests for the heuristic autoplayer."""

from settlement_sim.core.kinds import BuildingKind, JobKind
from settlement_sim.simulation.autoplay import AutoPlayer
from settlement_sim.simulation.settlement import Settlement


def test_desired_workers_split(state):
    state.population = 10
    for job in (JobKind.FARMER, JobKind.LUMBERJACK, JobKind.STONEMASON):
        state.unlocked_jobs[job] = True
    desired = AutoPlayer(farmer_share=0.4).desired_workers(state)
    assert desired == {JobKind.FARMER: 4, JobKind.LUMBERJACK: 3, JobKind.STONEMASON: 3}


def test_only_farming_unlocked_puts_everyone_on_food(state):
    state.population = 5
    state.unlocked_jobs[JobKind.FARMER] = True
    desired = AutoPlayer(farmer_share=0.4).desired_workers(state)
    assert desired[JobKind.FARMER] == 5


def test_nothing_unlocked_leaves_everyone_idle(state):
    state.population = 5
    desired = AutoPlayer().desired_workers(state)
    assert sum(desired.values()) == 0


def test_first_decision_gathers_and_builds_fields(settlement):
    player = AutoPlayer()
    taken = player.step(settlement)
    assert "gather wood" in taken
    assert "build fields" in taken
    assert settlement.state.buildings[BuildingKind.FIELDS] == 1


def test_autoplayed_settlement_grows(invariants):
    settlement = Settlement(ticks_per_second=20)
    settlement.subscribe(invariants)
    player = AutoPlayer(decision_interval=20)

    settlement.run(20 * 300, between_ticks=player)

    s = settlement.state
    assert s.population > 5
    assert s.buildings[BuildingKind.HOUSE] > 1
    assert s.jobs_assigned[JobKind.FARMER] > 0
