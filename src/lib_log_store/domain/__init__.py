"""Domain entities, value objects, and rules used by the log store."""

from __future__ import annotations

from .bounded_buffer import DEFAULT_CAPACITY, BoundedBuffer
from .errors import (
    DuplicateId,
    InvalidCapacity,
    InvalidField,
    InvalidId,
    InvalidLevel,
    InvalidLimit,
    InvalidTimestamp,
    LogStoreError,
    MissingField,
    MissingParameter,
    UnknownLevel,
)
from .events import LogEvent
from .levels import LEVEL_NAMES, LogLevel, index_of, is_loggable, passes_threshold
from .report import StatsFormat
from .validation import EventValidator, ValidationResult

__all__ = [
    "BoundedBuffer",
    "DEFAULT_CAPACITY",
    "DuplicateId",
    "EventValidator",
    "InvalidCapacity",
    "InvalidField",
    "InvalidId",
    "InvalidLevel",
    "InvalidLimit",
    "InvalidTimestamp",
    "LEVEL_NAMES",
    "LogEvent",
    "LogLevel",
    "LogStoreError",
    "MissingField",
    "MissingParameter",
    "StatsFormat",
    "UnknownLevel",
    "ValidationResult",
    "index_of",
    "is_loggable",
    "passes_threshold",
]
