"""Application use cases: ingestion, queries, statistics, maintenance."""

from __future__ import annotations

from .clear import create_clear_events
from .ingest import create_ingest_event, save_or_raise
from .query import QueryEngine, parse_limit, parse_threshold
from .shutdown import create_shutdown
from .stats import STATS_HEADER, StatsAggregator

__all__ = [
    "QueryEngine",
    "STATS_HEADER",
    "StatsAggregator",
    "create_clear_events",
    "create_ingest_event",
    "create_shutdown",
    "parse_limit",
    "parse_threshold",
    "save_or_raise",
]
