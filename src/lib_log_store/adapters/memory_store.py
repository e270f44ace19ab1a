"""In-memory implementation of :class:`EventStorePort`.

Purpose
-------
Hold validated events in an insertion-ordered dictionary keyed by event id,
guarded by a re-entrant lock so concurrent ingestion and queries stay
consistent.

Contents
--------
* :class:`InMemoryEventStore` - explicitly owned, constructor-injected store.

System Role
-----------
Default store wired by the runtime. Each instance owns its state; nothing is
shared at module level, so tests and requests never leak events into each
other.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from lib_log_store.application.ports.store import SaveOutcome
from lib_log_store.domain.events import LogEvent


class InMemoryEventStore:
    """Thread-safe keyed event store with atomic insert-if-absent.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_store.domain.levels import LogLevel
    >>> ts = datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    >>> event = LogEvent("evt-1", "hello", ts, "main", "svc", LogLevel.INFO)
    >>> store = InMemoryEventStore()
    >>> store.save(event).value, store.save(event).value
    ('stored', 'duplicate')
    >>> store.exists("evt-1"), len(store)
    (True, 1)
    """

    def __init__(self, events: Iterable[LogEvent] = ()) -> None:
        self._events: dict[str, LogEvent] = {}
        self._lock = threading.RLock()
        for event in events:
            self.save(event)

    def save(self, event: LogEvent) -> SaveOutcome:
        """Insert ``event`` unless an event with the same id is present."""

        with self._lock:
            if event.event_id in self._events:
                return SaveOutcome.DUPLICATE
            self._events[event.event_id] = event
            return SaveOutcome.STORED

    def exists(self, event_id: str) -> bool:
        with self._lock:
            return event_id in self._events

    def get(self, event_id: str) -> LogEvent | None:
        with self._lock:
            return self._events.get(event_id)

    def all(self) -> list[LogEvent]:
        """Return a snapshot copy in insertion order."""

        with self._lock:
            return list(self._events.values())

    def delete(self, event_id: str) -> None:
        with self._lock:
            self._events.pop(event_id, None)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        with self._lock:
            return event_id in self._events


__all__ = ["InMemoryEventStore"]
