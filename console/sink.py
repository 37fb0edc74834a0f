"""
console/sink.py -- Event sinks for console output.

Components that want to report operator-visible events receive a sink as a
constructor argument instead of reaching for a process-wide object. Two
implementations:

  LoggingEventSink  -- forwards to the safecord.console logger
  MemoryEventSink   -- bounded in-memory log with level filter and search,
                       for the developer console view and for tests
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Optional, Protocol

LEVELS = ("info", "warn", "error", "system")

_LOGGING_LEVELS = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "system": logging.INFO,
}


class EventSink(Protocol):
    def push(self, level: str, message: str) -> None: ...


class LoggingEventSink:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("safecord.console")

    def push(self, level: str, message: str) -> None:
        self.logger.log(_LOGGING_LEVELS.get(level, logging.INFO), message)


@dataclass(frozen=True)
class LogEntry:
    level: str
    message: str
    ts: float = field(default_factory=time.time)


class MemoryEventSink:
    """Keeps the most recent max_entries events; older ones fall off the front."""

    def __init__(self, max_entries: int = 2000) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    def push(self, level: str, message: str) -> None:
        if level not in LEVELS:
            level = "info"
        self._entries.append(LogEntry(level=level, message=message))

    def entries(self, level: str = "all", query: str = "") -> list[LogEntry]:
        """Return entries matching level ("all" for any) whose message contains query, case-insensitively."""
        needle = query.lower()
        return [
            e
            for e in self._entries
            if (level == "all" or e.level == level) and needle in e.message.lower()
        ]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
