"""Command surface: the owned state, its tick engine, and every user operation."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from settlement_sim.core.clock import SimClock, Ticker
from settlement_sim.core.config import TICKS_PER_SECOND
from settlement_sim.core.kinds import STORABLE_RESOURCES, BuildingKind, JobKind, ResourceKind, UpgradeKind
from settlement_sim.core.state import SettlementState, create_initial_state
from settlement_sim.economy import jobs
from settlement_sim.economy.capacity import refresh_ceilings
from settlement_sim.economy.catalog import BUILDINGS, JOBS, UPGRADES
from settlement_sim.economy.costs import building_cost, can_afford, pay, upgrade_cost
from settlement_sim.simulation import persistence
from settlement_sim.simulation.engine import TickEngine, TickResult
from settlement_sim.simulation.metrics import MetricsCollector
from settlement_sim.viz.logger import SimLogger

Subscriber = Callable[[SettlementState], None]


class Settlement:
    """Owns one SettlementState and serializes every tick and command on it.

    Each tick and each command runs under a single re-entrant lock, so a
    command never observes a half-applied tick even when a :class:`Ticker`
    drives ticks from another thread. Rejected commands return False and
    leave the state untouched.
    """

    def __init__(
        self,
        ticks_per_second: int = TICKS_PER_SECOND,
        logger: Optional[SimLogger] = None,
        metrics: Optional[MetricsCollector] = None,
        state: Optional[SettlementState] = None,
    ) -> None:
        self.logger = logger or SimLogger(verbosity=0)
        self.clock = SimClock(ticks_per_second)
        self.engine = TickEngine(ticks_per_second, logger=self.logger)
        self.metrics = metrics
        self.state = state or create_initial_state()
        refresh_ceilings(self.state)
        self.last_result: Optional[TickResult] = None

        self._lock = threading.RLock()
        self._ticking = False
        self._subscribers: list[Subscriber] = []
        self._ticker = Ticker(self.tick, self.clock.tick_interval)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self.state)

    def _log(self, category: str, text: str) -> None:
        self.engine.log_event(self.state, category, text)
        self.logger.flush(self.state.ticks)

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """Run one tick. Returns False if a tick is already in progress."""
        with self._lock:
            if self._ticking:
                return False
            self._ticking = True
            try:
                self.last_result = self.engine.tick(self.state)
                if self.metrics is not None:
                    self.metrics.record(self.state, self.last_result)
                self._notify()
            finally:
                self._ticking = False
        return True

    def run(self, ticks: int, between_ticks: Optional[Callable[["Settlement"], None]] = None) -> None:
        """Run *ticks* ticks back to back, without the real-time ticker."""
        for _ in range(ticks):
            self.tick()
            if between_ticks is not None:
                between_ticks(self)

    @property
    def running(self) -> bool:
        return self._ticker.running

    def start(self) -> None:
        if self._ticker.start():
            self.logger.log(SimLogger.LIFECYCLE, "Ticker started", tick=self.state.ticks)

    def stop(self) -> None:
        if self._ticker.stop():
            self.logger.log(SimLogger.LIFECYCLE, "Ticker stopped", tick=self.state.ticks)
            self.logger.flush(self.state.ticks)

    def reset(self) -> None:
        """Replace the state with a fresh seed; the ticker keeps its running status."""
        with self._lock:
            self.state = create_initial_state()
            refresh_ceilings(self.state)
            self.last_result = None
            self.logger.log(SimLogger.LIFECYCLE, "Settlement reset", tick=0)
            self.logger.flush(0)
            self._notify()

    # ------------------------------------------------------------------
    # Construction and purchases
    # ------------------------------------------------------------------

    def build_cost(self, kind: BuildingKind) -> dict[ResourceKind, int]:
        with self._lock:
            return building_cost(self.state, kind)

    def upgrade_cost(self, kind: UpgradeKind) -> dict[ResourceKind, int]:
        with self._lock:
            return upgrade_cost(self.state, kind)

    def build(self, kind: BuildingKind) -> bool:
        with self._lock:
            s = self.state
            cost = building_cost(s, kind)
            if not can_afford(s, cost):
                return False
            pay(s, cost)
            spec = BUILDINGS[kind]
            s.buildings[kind] = s.buildings.get(kind, 0) + 1
            for resource, amount in spec.storage_increase.items():
                s.resource_base_max[resource] = s.resource_base_max.get(resource, 0.0) + amount
            if spec.unlocks_job is not None and not s.unlocked_jobs.get(spec.unlocks_job, False):
                s.unlocked_jobs[spec.unlocks_job] = True
                self.logger.log(SimLogger.JOBS, f"{JOBS[spec.unlocks_job].name} unlocked", tick=s.ticks)
            refresh_ceilings(s)
            self._log(SimLogger.BUILD, f"Built {spec.name} (total: {s.buildings[kind]})")
            self._notify()
            return True

    def buy_upgrade(self, kind: UpgradeKind) -> bool:
        with self._lock:
            s = self.state
            spec = UPGRADES[kind]
            level = s.upgrades_purchased.get(kind, 0)
            if level >= spec.max_purchases:
                return False
            cost = upgrade_cost(s, kind)
            if not can_afford(s, cost):
                return False
            pay(s, cost)
            s.upgrades_purchased[kind] = level + 1
            refresh_ceilings(s)
            self._log(SimLogger.UPGRADE, f"Bought {spec.name} (level {level + 1}/{spec.max_purchases})")
            self._notify()
            return True

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    def assign(self, job: JobKind, count: int = 1) -> bool:
        with self._lock:
            if not jobs.assign(self.state, job, count):
                return False
            self.logger.log(SimLogger.JOBS, f"Assigned {count} {job.value}", tick=self.state.ticks)
            self._notify()
            return True

    def unassign(self, job: JobKind, count: int = 1) -> None:
        with self._lock:
            jobs.unassign(self.state, job, count)
            self.logger.log(SimLogger.JOBS, f"Unassigned {count} {job.value}", tick=self.state.ticks)
            self._notify()

    def manual_gather(self, resource: ResourceKind, amount: float) -> float:
        """Add *amount* of a storable resource, up to its ceiling. Returns what was added."""
        if resource not in STORABLE_RESOURCES:
            # population only changes through growth
            return 0.0
        with self._lock:
            s = self.state
            current = s.resources.get(resource, 0.0)
            ceiling = s.resource_max.get(resource, current)
            s.resources[resource] = max(current, min(ceiling, current + max(0.0, amount)))
            gained = s.resources[resource] - current
            self.logger.log(SimLogger.GATHER, f"Gathered {gained:g} {resource.value}", tick=s.ticks)
            self._notify()
            return gained

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> str:
        with self._lock:
            return persistence.dumps(self.state)

    def load(self, text: str) -> bool:
        """Replace the state with a validated saved one. On failure nothing changes."""
        with self._lock:
            try:
                loaded = persistence.loads(text)
            except persistence.StateValidationError as e:
                self.logger.log(SimLogger.PERSISTENCE, f"Load rejected: {e}", tick=self.state.ticks)
                self.logger.flush(self.state.ticks)
                return False
            refresh_ceilings(loaded)
            for resource in STORABLE_RESOURCES:
                loaded.resources[resource] = min(loaded.resources[resource], loaded.resource_max[resource])
            self.state = loaded
            self.last_result = None
            self.logger.log(SimLogger.PERSISTENCE, f"Loaded settlement at tick {loaded.ticks}", tick=loaded.ticks)
            self.logger.flush(loaded.ticks)
            self._notify()
            return True

    def save_to_file(self, path: str) -> None:
        text = self.save()
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def load_from_file(self, path: str) -> bool:
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            self.logger.log(SimLogger.PERSISTENCE, f"Load failed: {e}", tick=self.state.ticks)
            self.logger.flush(self.state.ticks)
            return False
        return self.load(text)
