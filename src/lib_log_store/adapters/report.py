"""Report adapter encoding statistics matrices as CSV, HTML, XLSX, or text.

Outputs
-------
* Tab-separated text with ``\\n`` line breaks.
* An HTML page holding one ``<table>``.
* An XLSX workbook with a single sheet named ``stats``.
* A Rich table rendered to plain or ANSI-coloured text.

Purpose
-------
Turn :class:`StatsAggregator` output into shareable artefacts while keeping
the same shape everywhere: header ``logger`` + eight taxonomy names, then one
zero-filled row per logger.

Contents
--------
* :class:`StatsReportAdapter` - implementation of :class:`StatsRendererPort`.
"""

from __future__ import annotations

import csv
import html
from collections.abc import Mapping
from io import BytesIO, StringIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from rich.console import Console
from rich.table import Table
from rich.text import Text

from lib_log_store.application.use_cases.stats import STATS_HEADER, StatsAggregator
from lib_log_store.domain.levels import LEVEL_NAMES, LogLevel
from lib_log_store.domain.report import STATS_SHEET_NAME, StatsFormat

_COLUMN_STYLES: dict[str, str] = {
    LogLevel.TRACE.name: "dim",
    LogLevel.DEBUG.name: "cyan",
    LogLevel.INFO.name: "green",
    LogLevel.WARN.name: "yellow",
    LogLevel.ERROR.name: "red",
    LogLevel.FATAL.name: "bold red",
}


def _excel_safe(value: str) -> str:
    """Escape XML-illegal control characters the way Excel writes them.

    >>> _excel_safe("svc\\x01")
    'svc_x0001_'
    """
    return ILLEGAL_CHARACTERS_RE.sub(lambda match: f"_x{ord(match.group()):04X}_", value)


class StatsReportAdapter:
    """Render statistics matrices into the supported encodings."""

    def render(
        self,
        matrix: Mapping[str, Mapping[str, int]],
        *,
        stats_format: StatsFormat,
        path: Path | None = None,
        colorize: bool = False,
    ) -> str | bytes:
        """Render ``matrix`` according to ``stats_format``.

        Examples
        --------
        >>> matrix = {"svc": {name: 0 for name in LEVEL_NAMES} | {"WARN": 1}}
        >>> StatsReportAdapter().render(matrix, stats_format=StatsFormat.CSV).splitlines()[1]
        'svc\\t0\\t0\\t0\\t0\\t1\\t0\\t0\\t0'
        """

        content: str | bytes
        if stats_format is StatsFormat.CSV:
            content = self._render_csv(matrix)
        elif stats_format is StatsFormat.HTML:
            content = self._render_html(matrix)
        elif stats_format is StatsFormat.XLSX:
            content = self._render_xlsx(matrix)
        elif stats_format is StatsFormat.TEXT:
            content = self._render_text(matrix, colorize=colorize)
        else:  # pragma: no cover - exhaustiveness guard
            raise ValueError(f"Unsupported stats format: {stats_format}")

        if path is not None:
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return content

    @staticmethod
    def _render_csv(matrix: Mapping[str, Mapping[str, int]]) -> str:
        """Render tab-separated rows; the header is always present.

        Examples
        --------
        >>> StatsReportAdapter._render_csv({})
        'logger\\tALL\\tTRACE\\tDEBUG\\tINFO\\tWARN\\tERROR\\tFATAL\\tOFF\\n'
        """
        buffer = StringIO()
        writer = csv.writer(buffer, delimiter="\t", lineterminator="\n")
        writer.writerow(STATS_HEADER)
        for logger, counts in StatsAggregator.rows(matrix):
            writer.writerow([logger, *counts])
        return buffer.getvalue()

    @staticmethod
    def _render_html(matrix: Mapping[str, Mapping[str, int]]) -> str:
        """Generate an HTML page with a single statistics table.

        Examples
        --------
        >>> StatsReportAdapter._render_html({}).startswith('<!DOCTYPE html><html><body><table>')
        True
        """
        header = "".join(f"<th>{html.escape(name)}</th>" for name in STATS_HEADER)
        rows = []
        for logger, counts in StatsAggregator.rows(matrix):
            cells = "".join(f"<td>{count}</td>" for count in counts)
            rows.append(f"<tr><td>{html.escape(logger)}</td>{cells}</tr>")
        return f"<!DOCTYPE html><html><body><table><tr>{header}</tr>{''.join(rows)}</table></body></html>"

    @staticmethod
    def _render_xlsx(matrix: Mapping[str, Mapping[str, int]]) -> bytes:
        """Build a workbook with one sheet named ``stats`` and return its bytes."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = STATS_SHEET_NAME
        sheet.append(list(STATS_HEADER))
        for logger, counts in StatsAggregator.rows(matrix):
            sheet.append([_excel_safe(logger), *counts])
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def _render_text(matrix: Mapping[str, Mapping[str, int]], *, colorize: bool) -> str:
        """Render a Rich table; ANSI styles are emitted only when ``colorize``."""
        table = Table(title="Log statistics")
        table.add_column("logger", no_wrap=True)
        for name in LEVEL_NAMES:
            table.add_column(name, justify="right", style=_COLUMN_STYLES.get(name, "") if colorize else "")
        for logger, counts in StatsAggregator.rows(matrix):
            table.add_row(Text(logger), *(str(count) for count in counts))

        buffer = StringIO()
        console = Console(
            file=buffer,
            force_terminal=colorize,
            no_color=not colorize,
            color_system="truecolor" if colorize else None,
            width=120,
            legacy_windows=False,
        )
        console.print(table)
        return buffer.getvalue()


__all__ = ["StatsReportAdapter"]
