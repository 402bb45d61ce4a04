"""Structured event logging for narrative and debugging."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Optional, TextIO


@dataclass
class LogEntry:
    """A single log entry."""

    tick: int
    category: str
    message: str
    data: dict = field(default_factory=dict)


class SimLogger:
    """Structured logging with categories and verbosity control."""

    # Category constants
    LIFECYCLE = "LIFECYCLE"
    POPULATION = "POPULATION"
    BUILD = "BUILD"
    UPGRADE = "UPGRADE"
    PERSISTENCE = "PERSISTENCE"
    JOBS = "JOBS"
    GATHER = "GATHER"

    _VERBOSITY_MAP = {
        LIFECYCLE: 0,
        POPULATION: 0,
        PERSISTENCE: 0,
        BUILD: 1,
        UPGRADE: 1,
        JOBS: 2,
        GATHER: 3,
    }

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = False,
    ) -> None:
        """
        verbosity levels:
            0 = only lifecycle, population and persistence
            1 = + construction and upgrades
            2 = + job changes
            3 = everything (debug)
        """
        self.verbosity = verbosity
        self._buffer: list[LogEntry] = []
        self._all_entries: list[LogEntry] = []
        self._file: Optional[TextIO] = None
        self._stdout = stdout

        if log_file:
            os.makedirs(os.path.dirname(log_file) if os.path.dirname(log_file) else ".", exist_ok=True)
            self._file = open(log_file, "w", encoding="utf-8")

    @property
    def entries(self) -> list[LogEntry]:
        return self._all_entries + self._buffer

    def log(self, category: str, message: str, tick: int = 0, **data) -> None:
        """Log an event."""
        self._buffer.append(LogEntry(tick=tick, category=category, message=message, data=data))

    def flush(self, tick: int) -> None:
        """Write buffered logs for the tick."""
        for entry in self._buffer:
            required_verbosity = self._VERBOSITY_MAP.get(entry.category, 1)
            if required_verbosity <= self.verbosity:
                line = f"[Tick {entry.tick:>6}] [{entry.category:<11}] {entry.message}"
                if self._stdout:
                    print(line)
                if self._file:
                    self._file.write(line + "\n")

        self._all_entries.extend(self._buffer)
        self._buffer.clear()

        if self._file:
            self._file.flush()

    def get_narrative(self, start_tick: int, end_tick: int) -> str:
        """Human-readable summary of a range of ticks."""
        entries = [e for e in self.entries if start_tick <= e.tick <= end_tick]
        if not entries:
            return f"Ticks {start_tick}-{end_tick}: Nothing notable happened."

        lines = [f"=== Ticks {start_tick}-{end_tick} ==="]
        for entry in entries:
            lines.append(f"  [{entry.category}] {entry.message}")
        return "\n".join(lines)

    def export_json(self, filepath: str) -> None:
        """Export all log entries to JSON."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        data = [
            {
                "tick": e.tick,
                "category": e.category,
                "message": e.message,
                "data": e.data,
            }
            for e in self.entries
        ]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None
