#!/usr/bin/env python3
"""Append-only history of submitted command lines"""

from collections import deque
from dataclasses import dataclass
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class HistoryEntry:
    sequence: int
    line: str

    def __str__(self):
        return f"{self.sequence}: {self.line}"


class HistoryBuffer:
    """
    Ordered log of raw input lines, numbered from 1.

    With a capacity the oldest entries are dropped once it is reached;
    sequence numbers keep counting so an evicted number is never reused.
    """

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity or None
        self._entries = deque(maxlen=self.capacity)
        self._next_sequence = 1

    def append(self, line: str) -> HistoryEntry:
        entry = HistoryEntry(self._next_sequence, line)
        self._next_sequence += 1
        self._entries.append(entry)
        return entry

    def get(self, sequence: int) -> Optional[HistoryEntry]:
        if not self._entries:
            return None
        offset = sequence - self._entries[0].sequence
        if offset < 0 or offset >= len(self._entries):
            return None
        return self._entries[offset]

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def last_sequence(self) -> int:
        return self._next_sequence - 1

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
