"""Error taxonomy shared by validation, storage, buffering, and queries.

Purpose
-------
Give every caller-visible failure a stable ``kind`` label so HTTP handlers,
metrics, and tests can tell them apart without parsing message text.

Contents
--------
* :class:`LogStoreError` base class (a :class:`ValueError`).
* One subclass per failure kind.

System Role
-----------
Validation failures are carried inside :class:`ValidationResult` objects;
query, capacity, and level lookups raise them directly because they signal
caller errors on a single parameter.
"""

from __future__ import annotations


class LogStoreError(ValueError):
    """Base class for all caller-visible failures."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingField(LogStoreError):
    """A required event field is absent or ``null``."""

    kind = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidField(LogStoreError):
    """A free-text event field carries a non-string value."""

    kind = "invalid_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"Invalid value for field: {field} (expected a string)")
        self.field = field


class InvalidId(LogStoreError):
    kind = "invalid_id"

    def __init__(self, message: str = "Invalid UUID format for id") -> None:
        super().__init__(message)


class InvalidTimestamp(LogStoreError):
    kind = "invalid_timestamp"

    def __init__(self, message: str = "Invalid timestamp format. Expected: ISO-8601 format") -> None:
        super().__init__(message)


class InvalidLevel(LogStoreError):
    """Level is unknown, or a filter-only level was used on an event."""

    kind = "invalid_level"

    def __init__(self, message: str, *, filter_only: bool = False) -> None:
        super().__init__(message)
        self.filter_only = filter_only


class InvalidLimit(LogStoreError):
    kind = "invalid_limit"


class MissingParameter(LogStoreError):
    kind = "missing_parameter"

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required parameters: {name}")
        self.name = name


class DuplicateId(LogStoreError):
    kind = "duplicate_id"

    def __init__(self, event_id: str) -> None:
        super().__init__("A log event with this id already exists")
        self.event_id = event_id


class InvalidCapacity(LogStoreError):
    kind = "invalid_capacity"


class UnknownLevel(LogStoreError):
    kind = "unknown_level"

    def __init__(self, name: object) -> None:
        super().__init__(f"Unknown log level: {name!r}")
        self.name = name


__all__ = [
    "DuplicateId",
    "InvalidCapacity",
    "InvalidField",
    "InvalidId",
    "InvalidLevel",
    "InvalidLimit",
    "InvalidTimestamp",
    "LogStoreError",
    "MissingField",
    "MissingParameter",
    "UnknownLevel",
]
