"""Use case aggregating stored events into a logger × level matrix.

Purpose
-------
Count events per logger and level and zero-fill every taxonomy column so each
report row has the same shape, ``ALL`` and ``OFF`` included.

Contents
--------
* :data:`STATS_HEADER` - header row shared by every encoding.
* :class:`StatsAggregator` - pure read of the store.
"""

from __future__ import annotations

from collections.abc import Iterator

from lib_log_store.application.ports.store import EventStorePort
from lib_log_store.domain.levels import LEVEL_NAMES

StatsMatrix = dict[str, dict[str, int]]

STATS_HEADER: tuple[str, ...] = ("logger", *LEVEL_NAMES)


class StatsAggregator:
    """Produce complete logger × level count matrices from a store snapshot."""

    def __init__(self, store: EventStorePort) -> None:
        self._store = store

    def aggregate(self) -> StatsMatrix:
        """Return ``logger -> level name -> count`` with zero-filled cells.

        Logger rows follow first appearance in the store snapshot; level keys
        follow the taxonomy order.
        """

        counts: dict[str, dict[str, int]] = {}
        for event in self._store.all():
            row = counts.setdefault(event.logger, {})
            row[event.level.name] = row.get(event.level.name, 0) + 1
        return {logger: {name: row.get(name, 0) for name in LEVEL_NAMES} for logger, row in counts.items()}

    __call__ = aggregate

    @staticmethod
    def header() -> list[str]:
        return list(STATS_HEADER)

    @staticmethod
    def rows(matrix: StatsMatrix) -> Iterator[tuple[str, list[int]]]:
        """Yield ``(logger, counts)`` with counts in taxonomy column order."""

        for logger, row in matrix.items():
            yield logger, [row.get(name, 0) for name in LEVEL_NAMES]


__all__ = ["STATS_HEADER", "StatsAggregator", "StatsMatrix"]
