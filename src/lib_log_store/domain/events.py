"""Domain event describing a structured log message.

Purpose
-------
Provide an immutable, serialisable representation of log events travelling
through ingestion, storage, buffering, and queries.

Contents
--------
* :class:`LogEvent` dataclass with wire-format helpers.
* :func:`parse_instant` / :func:`format_instant` for ISO-8601 instants.

System Role
-----------
Sits in the domain layer, ensuring adapters and use cases manipulate pure data
objects and keeping the wire shape (``errorDetails`` and friends) in one
place.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from .levels import LogLevel

_FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


def _six_digit_fraction(match: re.Match[str]) -> str:
    # datetime keeps microseconds; nanosecond digits are truncated
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 instant carrying ``Z`` or an explicit UTC offset.

    Examples
    --------
    >>> parse_instant("2025-09-23T12:00:00Z").isoformat()
    '2025-09-23T12:00:00+00:00'
    >>> parse_instant("2025-09-23T14:00:00+02:00").hour
    12
    >>> parse_instant("2025-09-23T12:00:00.123456789Z").microsecond
    123456
    >>> parse_instant("2025-09-23T12:00:00.5Z").microsecond
    500000
    """

    candidate = _FRACTION_RE.sub(_six_digit_fraction, text.strip(), count=1)
    if candidate[-1:] in ("Z", "z"):
        candidate = candidate[:-1] + "+00:00"
    return _ensure_aware(datetime.fromisoformat(candidate))


def format_instant(ts: datetime) -> str:
    """Render a UTC instant in ISO-8601 form with a ``Z`` suffix."""

    text = ts.astimezone(timezone.utc).isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass(slots=True, frozen=True, eq=False)
class LogEvent:
    """Immutable log event accepted by the store.

    Attributes
    ----------
    event_id:
        Canonical UUID string, unique within a store. Equality and hashing use
        this field only.
    message:
        Free text supplied by the producer.
    timestamp:
        Time of the event in timezone-aware UTC.
    thread:
        Origin-of-call label.
    logger:
        Logical source name; the statistics grouping key.
    level:
        Loggable :class:`LogLevel` (never ``ALL`` or ``OFF``).
    error_details:
        Optional captured stack trace or error text.
    """

    event_id: str
    message: str
    timestamp: datetime
    thread: str
    logger: str
    level: LogLevel
    error_details: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        if not self.event_id:
            raise ValueError("event_id must not be empty")
        if not self.level.is_loggable:
            raise ValueError(f"{self.level.name} is a filter-only level")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogEvent):
            return NotImplemented
        return self.event_id == other.event_id

    def __hash__(self) -> int:
        return hash(self.event_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the event to the wire shape with an ISO-8601 timestamp."""

        data: dict[str, Any] = {
            "id": self.event_id,
            "message": self.message,
            "timestamp": format_instant(self.timestamp),
            "thread": self.thread,
            "logger": self.logger,
            "level": self.level.name,
        }
        if self.error_details is not None:
            data["errorDetails"] = self.error_details
        return data

    def to_json(self) -> str:
        """Serialize the event to JSON with sorted keys for deterministic output."""

        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "LogEvent":
        """Reconstruct an event from :meth:`to_dict` output.

        Untrusted input goes through :class:`EventValidator` instead.
        """

        return cls(
            event_id=payload["id"],
            message=payload["message"],
            timestamp=parse_instant(payload["timestamp"]),
            thread=payload["thread"],
            logger=payload["logger"],
            level=LogLevel.from_name(payload["level"]),
            error_details=payload.get("errorDetails"),
        )

    def replace(self, **changes: Any) -> "LogEvent":
        """Return a copied event with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogEvent", "format_instant", "parse_instant"]
