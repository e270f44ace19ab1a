"""Validation of raw event payloads into :class:`LogEvent` objects.

Purpose
-------
Turn a decoded JSON object (possibly incomplete or malformed) into a fully
populated, normalised event, or report the first problem found.

Contents
--------
* :class:`ValidationResult` - result type carrying an event or an error.
* :class:`EventValidator` - ordered, short-circuiting checks.
* :func:`is_canonical_uuid` helper.

System Role
-----------
Invoked by the ingestion use case and the HTTP adapter. Expected bad input is
reported through :class:`ValidationResult` rather than raised, so callers
branch on ``result.ok`` instead of catching exceptions.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, cast

from .errors import InvalidField, InvalidId, InvalidLevel, InvalidTimestamp, LogStoreError, MissingField, UnknownLevel
from .events import LogEvent, parse_instant
from .levels import LogLevel

REQUIRED_FIELDS: tuple[str, ...] = ("message", "timestamp", "thread", "logger", "level")
"""Required wire fields, in the order they are checked."""

_TEXT_FIELDS: tuple[str, ...] = ("message", "thread", "logger")

_UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


def is_canonical_uuid(value: str) -> bool:
    """Return ``True`` for the 8-4-4-4-12 hexadecimal UUID form.

    Examples
    --------
    >>> is_canonical_uuid("123e4567-e89b-12d3-a456-426614174000")
    True
    >>> is_canonical_uuid("not-a-uuid")
    False
    """

    return bool(_UUID_RE.match(value))


def _new_uuid() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Either a validated :class:`LogEvent` or the first failure found."""

    event: LogEvent | None = None
    error: LogStoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def accepted(cls, event: LogEvent) -> "ValidationResult":
        return cls(event=event)

    @classmethod
    def rejected(cls, error: LogStoreError) -> "ValidationResult":
        return cls(error=error)

    def unwrap(self) -> LogEvent:
        """Return the event or raise the stored error."""

        if self.error is not None:
            raise self.error
        return cast(LogEvent, self.event)


class EventValidator:
    """Check and normalise raw event payloads.

    Parameters
    ----------
    id_provider:
        Callable returning fresh identifiers for payloads without ``id``;
        defaults to random UUIDs.

    Examples
    --------
    >>> validator = EventValidator(id_provider=lambda: "00000000-0000-4000-8000-000000000001")
    >>> result = validator.validate({
    ...     "message": "hi", "timestamp": "2025-09-23T12:00:00Z",
    ...     "thread": "main", "logger": "app", "level": "info",
    ... })
    >>> result.ok, result.event.level.name, result.event.event_id[-1]
    (True, 'INFO', '1')
    >>> validator.validate({"message": "hi"}).error.message
    'Missing required field: timestamp'
    """

    def __init__(self, *, id_provider: Callable[[], str] | None = None) -> None:
        self._id_provider = id_provider or _new_uuid

    def validate(self, payload: Mapping[str, Any]) -> ValidationResult:
        """Validate ``payload`` and return the outcome without raising."""

        for name in REQUIRED_FIELDS:
            if payload.get(name) is None:
                return ValidationResult.rejected(MissingField(name))
        for name in _TEXT_FIELDS:
            if not isinstance(payload[name], str):
                return ValidationResult.rejected(InvalidField(name))
        error_details = payload.get("errorDetails")
        if error_details is not None and not isinstance(error_details, str):
            return ValidationResult.rejected(InvalidField("errorDetails"))

        event_id = self._resolve_id(payload.get("id"))
        if event_id is None:
            return ValidationResult.rejected(InvalidId())

        raw_timestamp = payload["timestamp"]
        if not isinstance(raw_timestamp, str):
            return ValidationResult.rejected(InvalidTimestamp())
        try:
            timestamp = parse_instant(raw_timestamp)
        except ValueError:
            return ValidationResult.rejected(InvalidTimestamp())

        level_or_error = self._resolve_level(payload["level"])
        if isinstance(level_or_error, LogStoreError):
            return ValidationResult.rejected(level_or_error)

        return ValidationResult.accepted(
            LogEvent(
                event_id=event_id,
                message=payload["message"],
                timestamp=timestamp,
                thread=payload["thread"],
                logger=payload["logger"],
                level=level_or_error,
                error_details=error_details,
            )
        )

    def _resolve_id(self, raw: Any) -> str | None:
        if raw is None:
            return self._id_provider()
        if not isinstance(raw, str) or not is_canonical_uuid(raw):
            return None
        return str(uuid.UUID(raw))

    @staticmethod
    def _resolve_level(raw: Any) -> LogLevel | LogStoreError:
        try:
            level = LogLevel.from_name(raw)
        except UnknownLevel:
            return InvalidLevel("Invalid log level. Must be one of: TRACE, DEBUG, INFO, WARN, ERROR, FATAL")
        if not level.is_loggable:
            return InvalidLevel(
                "Invalid log level. ALL and OFF are filter settings, not valid log levels",
                filter_only=True,
            )
        return level


__all__ = ["EventValidator", "REQUIRED_FIELDS", "ValidationResult", "is_canonical_uuid"]
