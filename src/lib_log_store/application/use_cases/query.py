"""Use case answering filtered, newest-first queries over the store.

Purpose
-------
Validate the ``limit``/``level`` parameters, snapshot the store, keep the
events passing the threshold, order them by timestamp descending, and
truncate.

Contents
--------
* :func:`parse_limit` / :func:`parse_threshold` parameter validation.
* :class:`QueryEngine` - the query callable.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from lib_log_store.application.ports.store import EventStorePort
from lib_log_store.domain.errors import InvalidLevel, InvalidLimit, UnknownLevel
from lib_log_store.domain.events import LogEvent
from lib_log_store.domain.levels import LEVEL_NAMES, LogLevel

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_limit(limit: Any) -> int:
    """Return ``limit`` as a positive ``int`` or raise :class:`InvalidLimit`.

    Examples
    --------
    >>> parse_limit("5")
    5
    >>> parse_limit(0)
    Traceback (most recent call last):
    ...
    lib_log_store.domain.errors.InvalidLimit: Limit must be a positive integer
    """

    if isinstance(limit, bool):
        raise InvalidLimit("Invalid limit format")
    if isinstance(limit, str):
        text = limit.strip()
        if not _INTEGER_RE.match(text):
            raise InvalidLimit("Invalid limit format")
        value = int(text)
    elif isinstance(limit, int):
        value = limit
    else:
        raise InvalidLimit("Invalid limit format")
    if value < 1:
        raise InvalidLimit("Limit must be a positive integer")
    return value


def parse_threshold(level: LogLevel | str) -> LogLevel:
    """Return ``level`` as a taxonomy member, including ``ALL`` and ``OFF``."""

    if isinstance(level, LogLevel):
        return level
    try:
        return LogLevel.from_name(level)
    except UnknownLevel as exc:
        raise InvalidLevel(f"Invalid log level. Must be one of: {', '.join(LEVEL_NAMES)}") from exc


class QueryEngine:
    """Filter, order, and truncate stored events.

    Parameters
    ----------
    store:
        Store adapter read through :meth:`EventStorePort.all` snapshots.
    """

    def __init__(self, store: EventStorePort) -> None:
        self._store = store

    def query(self, threshold: LogLevel | str, limit: Any) -> list[LogEvent]:
        """Return at most ``limit`` events at or above ``threshold``, newest first.

        Ties on timestamp are broken by event id so repeated calls on the same
        store contents return the same order.
        """

        count = parse_limit(limit)
        minimum = parse_threshold(threshold)
        matching = [event for event in self._store.all() if event.level.passes(minimum)]
        matching.sort(key=lambda event: (event.timestamp, event.event_id), reverse=True)
        logger.debug("query level=%s limit=%d matched=%d", minimum.name, count, len(matching))
        return matching[:count]

    __call__ = query


__all__ = ["QueryEngine", "parse_limit", "parse_threshold"]
