"""
Observational event log.

Append-only record of speciation, extinction, event triggers and total
extinction. Bounded: the oldest entries are dropped once capacity is reached.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List

from .constants import EVENT_LOG_CAPACITY


class LogKind(Enum):
    """Display hint for presentation"""
    EVENT = "event"
    SPLIT = "split"
    SPECIATION = "speciation"
    EXTINCTION = "extinction"
    TOTAL_EXTINCTION = "total_extinction"


@dataclass(frozen=True)
class LogEntry:
    """Single log record"""
    generation: int
    message: str
    kind: LogKind

    def to_dict(self) -> dict:
        return {
            'generation': self.generation,
            'message': self.message,
            'kind': self.kind.value,
        }


class EventLog:
    """Bounded log owned by the simulation clock"""

    def __init__(self, capacity: int = EVENT_LOG_CAPACITY):
        self.capacity = capacity
        self._entries: deque = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def append(self, generation: int, message: str, kind: LogKind) -> LogEntry:
        entry = LogEntry(generation=generation, message=message, kind=kind)
        self._entries.append(entry)
        return entry

    def tail(self, n: int) -> List[LogEntry]:
        """Last n entries, oldest first"""
        if n <= 0:
            return []
        return list(self._entries)[-n:]

    def of_kind(self, kind: LogKind) -> List[LogEntry]:
        return [e for e in self._entries if e.kind is kind]

    def clear(self):
        self._entries.clear()
