"""Level taxonomy and the threshold rule used for filtering.

Purpose
-------
Fix the ordered severity hierarchy shared by ingestion, queries, and
statistics, including the two filter-only pseudo-levels ``ALL`` and ``OFF``.

Contents
--------
* :class:`LogLevel` enum ordered from ``ALL`` to ``OFF``.
* :func:`index_of`, :func:`is_loggable`, :func:`passes_threshold` helpers that
  accept enum members or level names.
* :data:`LEVEL_NAMES` constant with the taxonomy in fixed order.

System Role
-----------
Every other component compares severities through this module, so the
threshold rule lives in exactly one place.
"""

from __future__ import annotations

import logging
from enum import Enum

from .errors import UnknownLevel


class LogLevel(Enum):
    """Enumerated levels in taxonomy order; the value is the taxonomy index."""

    ALL = 0
    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5
    FATAL = 6
    OFF = 7

    @property
    def index(self) -> int:
        """Return the position of the level inside the fixed taxonomy."""

        return self.value

    @property
    def is_loggable(self) -> bool:
        """Return ``False`` for the filter-only levels ``ALL`` and ``OFF``."""

        return self not in _FILTER_ONLY

    @property
    def icon(self) -> str:
        """Return the unicode icon visualizing the level on colored consoles."""

        return _ICON_TABLE.get(self, "")

    def passes(self, threshold: "LogLevel") -> bool:
        """Return ``True`` when an event at this level passes ``threshold``.

        Examples
        --------
        >>> LogLevel.WARN.passes(LogLevel.INFO)
        True
        >>> LogLevel.DEBUG.passes(LogLevel.INFO)
        False
        >>> LogLevel.FATAL.passes(LogLevel.OFF)
        False
        """

        if threshold is LogLevel.ALL:
            return True
        if threshold is LogLevel.OFF:
            return False
        return self.value >= threshold.value

    def to_python_level(self) -> int:
        """Return the :mod:`logging` number matching this level."""

        try:
            return _PYTHON_LEVELS[self]
        except KeyError as exc:
            raise ValueError(f"{self.name} is a filter-only level") from exc

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve ``name`` case-insensitively, raising :class:`UnknownLevel`.

        Examples
        --------
        >>> LogLevel.from_name(" warn ") is LogLevel.WARN
        True
        """

        if not isinstance(name, str):
            raise UnknownLevel(name)
        normalized = name.strip().upper()
        try:
            return cls[normalized]
        except KeyError as exc:
            raise UnknownLevel(name) from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging number, rounding down to a known level.

        Examples
        --------
        >>> LogLevel.from_python_level(logging.WARNING) is LogLevel.WARN
        True
        >>> LogLevel.from_python_level(25) is LogLevel.INFO
        True
        >>> LogLevel.from_python_level(1) is LogLevel.TRACE
        True
        """

        resolved = LogLevel.TRACE
        for member, number in _PYTHON_LEVELS.items():
            if level >= number:
                resolved = member
        return resolved


_FILTER_ONLY = frozenset({LogLevel.ALL, LogLevel.OFF})

TRACE_LEVEL_NUM = 5
"""Numeric stdlib level used for ``TRACE`` (below ``logging.DEBUG``)."""

_PYTHON_LEVELS: dict[LogLevel, int] = {
    LogLevel.TRACE: TRACE_LEVEL_NUM,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}

_ICON_TABLE = {
    LogLevel.TRACE: "·",
    LogLevel.DEBUG: "🐞",
    LogLevel.INFO: "ℹ",
    LogLevel.WARN: "⚠",
    LogLevel.ERROR: "✖",
    LogLevel.FATAL: "☠",
}
# Console glyphs displayed by the Rich adapter per loggable level.

LEVEL_NAMES: tuple[str, ...] = tuple(member.name for member in LogLevel)
"""Taxonomy names in fixed order, used as report column headers."""

LOGGABLE_LEVELS: tuple[LogLevel, ...] = tuple(member for member in LogLevel if member.is_loggable)


def coerce_level(level: LogLevel | str) -> LogLevel:
    """Return ``level`` as a :class:`LogLevel`, parsing names when needed."""

    if isinstance(level, LogLevel):
        return level
    return LogLevel.from_name(level)


def index_of(level: LogLevel | str) -> int:
    """Return the taxonomy index of ``level``; unknown names raise :class:`UnknownLevel`."""

    return coerce_level(level).index


def is_loggable(level: LogLevel | str) -> bool:
    """Return ``True`` when ``level`` may be carried by a stored event."""

    return coerce_level(level).is_loggable


def passes_threshold(level: LogLevel | str, threshold: LogLevel | str) -> bool:
    """Apply the threshold rule to ``level`` and ``threshold``.

    Examples
    --------
    >>> passes_threshold("ERROR", "all")
    True
    >>> passes_threshold("TRACE", "DEBUG")
    False
    """

    return coerce_level(level).passes(coerce_level(threshold))


__all__ = [
    "LEVEL_NAMES",
    "LOGGABLE_LEVELS",
    "LogLevel",
    "TRACE_LEVEL_NUM",
    "coerce_level",
    "index_of",
    "is_loggable",
    "passes_threshold",
]
