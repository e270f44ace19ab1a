"""Event store port describing the authoritative collection of events.

Purpose
-------
Let use cases store and read events without knowing whether an in-memory map
or an external database sits behind the contract.

Contents
--------
* :class:`SaveOutcome` - first-class result of a save attempt.
* :class:`EventStorePort` - runtime-checkable protocol.

System Role
-----------
Implementations must make ``save`` an atomic insert-if-absent: concurrent
saves sharing one id yield exactly one :attr:`SaveOutcome.STORED`.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from lib_log_store.domain.events import LogEvent


class SaveOutcome(Enum):
    """Distinguish "stored now" from "already recorded"."""

    STORED = "stored"
    DUPLICATE = "duplicate"


@runtime_checkable
class EventStorePort(Protocol):
    """Keyed, insertion-ordered collection of validated events."""

    def save(self, event: LogEvent) -> SaveOutcome:
        """Insert ``event`` unless its id is already present."""

    def exists(self, event_id: str) -> bool:
        """Return ``True`` when an event with ``event_id`` is stored."""

    def get(self, event_id: str) -> LogEvent | None:
        """Return the stored event or ``None``."""

    def all(self) -> list[LogEvent]:
        """Return a point-in-time snapshot of every stored event."""

    def delete(self, event_id: str) -> None:
        """Remove one event; absent ids are ignored."""

    def clear(self) -> None:
        """Remove every event; clearing an empty store is a no-op."""


__all__ = ["EventStorePort", "SaveOutcome"]
