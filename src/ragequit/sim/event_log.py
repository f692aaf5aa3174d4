"""Bounded combat log shown next to the fight.

Only the most recent ``capacity`` entries are kept.  Sequence numbers
keep increasing across :meth:`EventLog.clear` so a collaborator can tell
new entries from ones it has already rendered.
"""

from __future__ import annotations

from collections import deque
from enum import Enum

from pydantic import BaseModel


class LogKind(str, Enum):
    DAMAGE = "damage"
    HEAL = "heal"
    EFFECT = "effect"
    INFO = "info"
    SHIELD = "shield"


class LogEntry(BaseModel):
    model_config = {"frozen": True}

    seq: int
    elapsed: float
    """Seconds into the level when the entry was written."""

    kind: LogKind
    message: str


class EventLog:
    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._seq = 0

    def add(self, kind: LogKind, message: str, elapsed: float = 0.0) -> LogEntry:
        self._seq += 1
        entry = LogEntry(seq=self._seq, elapsed=round(elapsed, 3), kind=kind, message=message)
        self._entries.append(entry)
        return entry

    def entries(self) -> list[LogEntry]:
        """Oldest first."""
        return list(self._entries)

    def since(self, seq: int) -> list[LogEntry]:
        """Entries newer than *seq*."""
        return [e for e in self._entries if e.seq > seq]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
