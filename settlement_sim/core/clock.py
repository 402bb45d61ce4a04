"""Time system for the simulation: tick counting and the real-time ticker."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from settlement_sim.core.config import TICKS_PER_SECOND


class SimClock:
    """Converts a tick count into simulated time."""

    def __init__(self, ticks_per_second: int = TICKS_PER_SECOND) -> None:
        self.ticks_per_second = ticks_per_second

    @property
    def tick_interval(self) -> float:
        """Seconds between ticks."""
        return 1.0 / self.ticks_per_second

    def seconds(self, ticks: int) -> float:
        return ticks / self.ticks_per_second

    def ticks_for(self, seconds: float) -> int:
        return int(round(seconds * self.ticks_per_second))


class Ticker:
    """Calls *callback* every *interval* seconds on a daemon thread.

    ``start`` and ``stop`` are idempotent. ``stop`` waits for the thread to
    finish, so no callback runs after it returns.
    """

    def __init__(self, callback: Callable[[], object], interval: float) -> None:
        self._callback = callback
        self.interval = interval
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._guard = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Begin ticking. Returns False if already running."""
        with self._guard:
            if self.running:
                return False
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="settlement-ticker",
                daemon=True,
            )
            self._thread.start()
            return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Cancel future ticks. Returns False if it was not running."""
        with self._guard:
            thread = self._thread
            if thread is None:
                return False
            self._stop_event.set()
            self._thread = None
        if thread is not threading.current_thread():
            thread.join(timeout)
        return True

    def _run(self, stop_event: threading.Event) -> None:
        # wait() returns True once stop is requested
        while not stop_event.wait(self.interval):
            self._callback()
