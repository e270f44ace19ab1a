"""Bounded buffer storing the most recent log events with loss accounting.

Purpose
-------
Keep a fixed number of recent events in memory for monitoring sinks while
reporting exactly how many were evicted under producer pressure.

Contents
--------
* :data:`DEFAULT_CAPACITY` - capacity of a freshly created buffer.
* :class:`BoundedBuffer` with capacity changes, snapshots, and JSON export.

System Role
-----------
Backs :class:`lib_log_store.adapters.sinks.BufferSink`. The discard counter is
the observable signal for loss; eviction itself is never an error.
"""

from __future__ import annotations

import json
import threading
from collections import deque
from pathlib import Path
from typing import Deque, Iterable, Iterator

from .errors import InvalidCapacity
from .events import LogEvent

DEFAULT_CAPACITY = 1000


def _check_capacity(capacity: object) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidCapacity(f"capacity must be an integer, got {capacity!r}")
    if capacity < 0:
        raise InvalidCapacity("capacity cannot be negative")
    return capacity


class BoundedBuffer:
    """Insertion-ordered buffer that evicts its oldest entry when full.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_store.domain.levels import LogLevel
    >>> def make(n):
    ...     ts = datetime(2025, 9, 30, 12, n, tzinfo=timezone.utc)
    ...     return LogEvent(f"id-{n}", f"msg-{n}", ts, "main", "app", LogLevel.INFO)
    >>> buffer = BoundedBuffer(capacity=2)
    >>> for n in range(3):
    ...     buffer.append(make(n))
    >>> [event.message for event in buffer.snapshot()], buffer.discarded_count
    (['msg-1', 'msg-2'], 1)
    """

    def __init__(self, *, capacity: int = DEFAULT_CAPACITY) -> None:
        self._capacity = _check_capacity(capacity)
        self._buffer: Deque[LogEvent] = deque()
        self._discarded = 0
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        """Return the configured buffer size."""

        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self.set_capacity(value)

    @property
    def discarded_count(self) -> int:
        """Return the number of evictions since construction."""

        return self._discarded

    @property
    def count(self) -> int:
        return len(self)

    def set_capacity(self, capacity: int) -> None:
        """Change the capacity, evicting the oldest entries that no longer fit."""

        new_capacity = _check_capacity(capacity)
        with self._lock:
            self._capacity = new_capacity
            while len(self._buffer) > new_capacity:
                self._evict_oldest()

    def append(self, event: LogEvent) -> None:
        """Append an event to the buffer, evicting at most one older entry."""

        with self._lock:
            self._buffer.append(event)
            if len(self._buffer) > self._capacity:
                self._evict_oldest()

    def extend(self, events: Iterable[LogEvent]) -> None:
        """Append a sequence of events preserving chronological order."""
        for event in events:
            self.append(event)

    def snapshot(self) -> tuple[LogEvent, ...]:
        """Return an immutable copy of the current buffer state, oldest first."""

        with self._lock:
            return tuple(self._buffer)

    def messages(self) -> list[str]:
        """Return the buffered messages rendered one per line."""

        return [f"{event.message}\n" for event in self.snapshot()]

    def __iter__(self) -> Iterator[LogEvent]:
        """Iterate over a snapshot of buffered events from oldest to newest."""
        return iter(self.snapshot())

    def __len__(self) -> int:
        """Return the number of events currently stored."""
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        """Remove all buffered events; the discard counter is left untouched."""
        with self._lock:
            self._buffer.clear()

    def export(self, path: Path) -> None:
        """Write the buffered events to ``path`` as a JSON array."""
        payload = json.dumps([event.to_dict() for event in self.snapshot()], sort_keys=True)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")

    def _evict_oldest(self) -> None:
        self._buffer.popleft()
        self._discarded += 1


__all__ = ["BoundedBuffer", "DEFAULT_CAPACITY"]
