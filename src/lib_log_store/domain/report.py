"""Statistics report format enumeration.

Purpose
-------
Standardise the encodings a logger × level statistics matrix can be rendered
to, shared by the HTTP service, the CLI, and the renderer adapter.

Contents
--------
* :class:`StatsFormat` enumeration with parsing helpers and media types.
"""

from __future__ import annotations

from enum import Enum


class StatsFormat(Enum):
    """Define the supported encodings for statistics reports.

    Examples
    --------
    >>> StatsFormat.CSV.value
    'csv'
    >>> StatsFormat.from_name('excel') is StatsFormat.XLSX
    True
    """

    CSV = "csv"
    HTML = "html"
    XLSX = "xlsx"
    TEXT = "text"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def is_binary(self) -> bool:
        return self is StatsFormat.XLSX

    @classmethod
    def from_name(cls, name: str) -> "StatsFormat":
        """Return the matching enum member for a case-insensitive name.

        ``excel`` is accepted as an alias for ``xlsx``.

        Examples
        --------
        >>> StatsFormat.from_name('  HTML  ') is StatsFormat.HTML
        True
        >>> StatsFormat.from_name('yaml')
        Traceback (most recent call last):
        ...
        ValueError: Unsupported stats format: 'yaml'
        """

        normalized = name.strip().lower()
        normalized = _ALIASES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unsupported stats format: {name!r}")


_ALIASES = {"excel": "xlsx", "xls": "xlsx", "txt": "text"}

_MEDIA_TYPES = {
    StatsFormat.CSV: "text/csv",
    StatsFormat.HTML: "text/html",
    StatsFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    StatsFormat.TEXT: "text/plain",
}

STATS_SHEET_NAME = "stats"
"""Sheet name used by spreadsheet encodings."""


__all__ = ["STATS_SHEET_NAME", "StatsFormat"]
