from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from lib_log_store import runtime
from lib_log_store.domain.events import LogEvent
from lib_log_store.domain.levels import LogLevel

BASE_TIME = datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)

_ENV_VARS = (
    "LOG_STORE_BUFFER_CAPACITY",
    "LOG_STORE_BUFFER_EXPORT",
    "LOG_STORE_ENABLE_BUFFER",
    "LOG_STORE_REMOTE_URL",
    "LOG_STORE_REMOTE_TIMEOUT",
    "LOG_STORE_CONSOLE",
    "LOG_STORE_HOST",
    "LOG_STORE_PORT",
    "LOG_STORE_URL",
    "LOG_STORE_USE_DOTENV",
)


def uuid_for(index: int) -> str:
    return f"00000000-0000-4000-8000-{index:012d}"


EventFactory = Callable[..., LogEvent]
PayloadFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def make_event() -> EventFactory:
    """Return a factory building events offset by ``index`` seconds from a fixed base time."""

    def factory(
        index: int = 0,
        *,
        level: LogLevel = LogLevel.INFO,
        logger: str = "svc",
        message: str | None = None,
        timestamp: datetime | None = None,
        error_details: str | None = None,
    ) -> LogEvent:
        return LogEvent(
            event_id=uuid_for(index),
            message=message if message is not None else f"message-{index}",
            timestamp=timestamp if timestamp is not None else BASE_TIME + timedelta(seconds=index),
            thread="main",
            logger=logger,
            level=level,
            error_details=error_details,
        )

    return factory


@pytest.fixture
def make_payload() -> PayloadFactory:
    """Return a factory building valid wire payloads; keyword overrides replace fields."""

    def factory(index: int = 0, **overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": uuid_for(index),
            "message": f"message-{index}",
            "timestamp": (BASE_TIME + timedelta(seconds=index)).isoformat().replace("+00:00", "Z"),
            "thread": "main",
            "logger": "svc",
            "level": "INFO",
        }
        payload.update(overrides)
        return payload

    return factory


@pytest.fixture(autouse=True)
def _isolate_runtime(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear ``LOG_STORE_*`` variables and tear down any runtime a test leaves behind."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    if runtime.is_initialised():
        runtime.shutdown()
