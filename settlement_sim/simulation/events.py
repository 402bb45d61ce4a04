"""Bounded, most-recent-first log of human-readable settlement events."""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Iterable, Iterator, Optional

from settlement_sim.core.config import EVENT_LOG_LIMIT, EVENT_TIME_FORMAT


class EventLog:
    """Fixed-capacity event log. Newest entry first; the oldest is dropped on overflow."""

    def __init__(self, entries: Optional[Iterable[str]] = None, limit: int = EVENT_LOG_LIMIT) -> None:
        self._entries: deque[str] = deque(maxlen=limit)
        if entries:
            # entries arrive newest-first, so append in order
            for entry in entries:
                if len(self._entries) == limit:
                    break
                self._entries.append(str(entry))

    @property
    def limit(self) -> int:
        return self._entries.maxlen or EVENT_LOG_LIMIT

    def record(self, text: str, when: Optional[datetime] = None) -> str:
        """Prefix *text* with the wall-clock time and push it to the front."""
        stamp = (when or datetime.now()).strftime(EVENT_TIME_FORMAT)
        entry = f"[{stamp}] {text}"
        self._entries.appendleft(entry)
        return entry

    def latest(self) -> Optional[str]:
        return self._entries[0] if self._entries else None

    def to_list(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]
