"""Sink port describing destinations for accepted log events.

Purpose
-------
Replace an inheritance-based appender hierarchy with a two-method capability
contract. Store-backed, buffer-backed, remote, and console sinks implement it
independently.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_store.domain.events import LogEvent


class SinkClosedError(RuntimeError):
    """Raised when an event is offered to a sink after :meth:`close`."""


@runtime_checkable
class LogSinkPort(Protocol):
    """Accept validated events until closed."""

    def accept(self, event: LogEvent) -> None:
        """Route ``event`` to the sink's destination."""

    def close(self) -> None:
        """Release resources; repeated calls are no-ops."""


__all__ = ["LogSinkPort", "SinkClosedError"]
