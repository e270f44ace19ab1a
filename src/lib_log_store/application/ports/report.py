"""Report port defining statistics export contracts.

Purpose
-------
Describe how a logger × level matrix is encoded into shareable artefacts so
the HTTP service and CLI can trigger exports without coupling to encoders.

Contents
--------
* :class:`StatsRendererPort` - protocol specifying the rendering call.

System Role
-----------
Establishes the boundary between the statistics use case and the CSV, HTML,
XLSX, and console encoders. Every encoding keeps the same shape: header row
``logger`` followed by the eight taxonomy names, one zero-filled row per
logger.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from lib_log_store.domain.report import StatsFormat


@runtime_checkable
class StatsRendererPort(Protocol):
    """Encode a statistics matrix into text or bytes.

    Parameters
    ----------
    matrix:
        Mapping ``logger -> level name -> count`` with every taxonomy level
        present in each row.
    stats_format:
        Target encoding.
    path:
        Optional destination path; ``None`` keeps the payload in memory only.
    colorize:
        Toggle for ANSI colour in the text encoding.

    Returns
    -------
    str | bytes
        ``bytes`` for binary encodings (XLSX), ``str`` otherwise.

    Examples
    --------
    >>> class Recorder:
    ...     def render(self, matrix, *, stats_format, path=None, colorize=False):
    ...         return f"{len(matrix)}:{stats_format.value}"
    >>> isinstance(Recorder(), StatsRendererPort)
    True
    >>> Recorder().render({}, stats_format=StatsFormat.CSV)
    '0:csv'
    """

    def render(
        self,
        matrix: Mapping[str, Mapping[str, int]],
        *,
        stats_format: StatsFormat,
        path: Path | None = None,
        colorize: bool = False,
    ) -> str | bytes:
        """Render ``matrix`` according to ``stats_format``."""


__all__ = ["StatsRendererPort"]
