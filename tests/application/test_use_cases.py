from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from lib_log_store.adapters.memory_store import InMemoryEventStore
from lib_log_store.adapters.metrics import InMemoryMetrics
from lib_log_store.application.use_cases import (
    STATS_HEADER,
    QueryEngine,
    StatsAggregator,
    create_clear_events,
    create_ingest_event,
    create_shutdown,
    parse_limit,
    parse_threshold,
    save_or_raise,
)
from lib_log_store.domain import BoundedBuffer, EventValidator, LogEvent, LogLevel
from lib_log_store.domain.errors import DuplicateId, InvalidLevel, InvalidLimit


SAME_INSTANT = datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def __call__(self, name: str, payload: dict) -> None:
        self.calls.append((name, payload))


class _RecordingSink:
    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self.log = log
        self.events: list[LogEvent] = []

    def accept(self, event: LogEvent) -> None:
        self.events.append(event)
        self.log.append(f"accept:{self.name}")

    def close(self) -> None:
        self.log.append(f"close:{self.name}")


class _ExplodingSink:
    def accept(self, event: LogEvent) -> None:
        raise RuntimeError("sink down")

    def close(self) -> None:
        pass


# ---------------------------------------------------------------- query


@pytest.mark.parametrize("raw, expected", [(1, 1), ("5", 5), (" 12 ", 12), ("+3", 3), (2**31, 2**31)])
def test_parse_limit_accepts_positive_integers(raw: object, expected: int) -> None:
    assert parse_limit(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1.5", "", True, 2.0, None])
def test_parse_limit_rejects_malformed_values(raw: object) -> None:
    with pytest.raises(InvalidLimit, match="Invalid limit format"):
        parse_limit(raw)


@pytest.mark.parametrize("raw", [0, -1, "0", "-7"])
def test_parse_limit_rejects_non_positive_values(raw: object) -> None:
    with pytest.raises(InvalidLimit, match="Limit must be a positive integer"):
        parse_limit(raw)


def test_parse_threshold_accepts_filter_levels() -> None:
    assert parse_threshold("all") is LogLevel.ALL
    assert parse_threshold("OFF") is LogLevel.OFF
    assert parse_threshold(LogLevel.WARN) is LogLevel.WARN


def test_parse_threshold_rejects_unknown_names() -> None:
    with pytest.raises(InvalidLevel, match="Must be one of: ALL, TRACE, DEBUG, INFO, WARN, ERROR, FATAL, OFF"):
        parse_threshold("LOUD")


def test_query_filters_orders_and_truncates(make_event) -> None:
    store = InMemoryEventStore(
        [
            make_event(0, level=LogLevel.DEBUG),
            make_event(1, level=LogLevel.WARN),
            make_event(2, level=LogLevel.ERROR),
            make_event(3, level=LogLevel.INFO),
            make_event(4, level=LogLevel.FATAL),
        ]
    )
    engine = QueryEngine(store)

    result = engine.query("WARN", 2)

    assert [event.message for event in result] == ["message-4", "message-2"]
    assert [event.message for event in engine("warn", "10")] == ["message-4", "message-2", "message-1"]


def test_query_all_returns_everything_newest_first(make_event) -> None:
    store = InMemoryEventStore([make_event(index, level=LogLevel.TRACE) for index in range(3)])
    result = QueryEngine(store).query(LogLevel.ALL, 10)
    assert [event.message for event in result] == ["message-2", "message-1", "message-0"]


def test_query_off_returns_nothing(make_event) -> None:
    store = InMemoryEventStore([make_event(0, level=LogLevel.FATAL)])
    assert QueryEngine(store).query("OFF", 10) == []


def test_query_on_empty_store_returns_empty_list() -> None:
    assert QueryEngine(InMemoryEventStore()).query("ALL", 5) == []


def test_query_is_deterministic_for_equal_timestamps(make_event) -> None:
    events = [make_event(index, timestamp=SAME_INSTANT) for index in (3, 1, 2)]
    engine = QueryEngine(InMemoryEventStore(events))

    first = [event.event_id for event in engine.query("ALL", 3)]
    second = [event.event_id for event in engine.query("ALL", 3)]

    assert first == second
    assert first == sorted(first, reverse=True)


def test_query_validates_limit_before_level(make_event) -> None:
    engine = QueryEngine(InMemoryEventStore([make_event(0)]))
    with pytest.raises(InvalidLimit):
        engine.query("LOUD", 0)


def test_query_does_not_mutate_store(make_event) -> None:
    store = InMemoryEventStore([make_event(index) for index in range(3)])
    QueryEngine(store).query("ALL", 1)
    assert [event.message for event in store.all()] == ["message-0", "message-1", "message-2"]


# ---------------------------------------------------------------- stats


def test_stats_are_zero_filled_in_taxonomy_order(make_event) -> None:
    store = InMemoryEventStore(
        [
            make_event(0, logger="db", level=LogLevel.WARN),
            make_event(1, logger="api", level=LogLevel.INFO),
            make_event(2, logger="db", level=LogLevel.WARN),
            make_event(3, logger="db", level=LogLevel.ERROR),
        ]
    )
    aggregator = StatsAggregator(store)

    matrix = aggregator.aggregate()

    assert list(matrix) == ["db", "api"]
    assert list(matrix["db"]) == ["ALL", "TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL", "OFF"]
    assert matrix["db"]["WARN"] == 2
    assert matrix["db"]["ERROR"] == 1
    assert matrix["db"]["ALL"] == 0
    assert matrix["db"]["OFF"] == 0
    assert matrix["api"] == {"ALL": 0, "TRACE": 0, "DEBUG": 0, "INFO": 1, "WARN": 0, "ERROR": 0, "FATAL": 0, "OFF": 0}
    assert sum(sum(row.values()) for row in matrix.values()) == len(store)


def test_stats_on_empty_store_is_empty() -> None:
    assert StatsAggregator(InMemoryEventStore())() == {}


def test_stats_header_and_rows(make_event) -> None:
    store = InMemoryEventStore([make_event(0, logger="svc", level=LogLevel.FATAL)])
    aggregator = StatsAggregator(store)

    assert aggregator.header() == list(STATS_HEADER)
    assert list(aggregator.rows(aggregator.aggregate())) == [("svc", [0, 0, 0, 0, 0, 0, 1, 0])]


# ---------------------------------------------------------------- ingest


def test_ingest_stores_and_fans_out(make_payload) -> None:
    store = InMemoryEventStore()
    log: list[str] = []
    sink = _RecordingSink("buffer", log)
    metrics = InMemoryMetrics()
    recorder = _Recorder()
    ingest = create_ingest_event(
        validator=EventValidator(),
        store=store,
        sinks=[sink],
        metrics=metrics,
        diagnostic=recorder,
    )

    result = ingest(make_payload(1))

    assert result == {"ok": True, "event_id": "00000000-0000-4000-8000-000000000001", "outcome": "stored"}
    assert store.exists(result["event_id"])
    assert [event.event_id for event in sink.events] == [result["event_id"]]
    assert metrics.counter("events.stored") == 1
    assert recorder.calls[0][0] == "stored"


def test_ingest_reports_duplicates_without_touching_sinks(make_payload) -> None:
    store = InMemoryEventStore()
    log: list[str] = []
    sink = _RecordingSink("buffer", log)
    metrics = InMemoryMetrics()
    ingest = create_ingest_event(validator=EventValidator(), store=store, sinks=[sink], metrics=metrics)

    ingest(make_payload(1))
    result = ingest(make_payload(1, message="again"))

    assert result["ok"] is False
    assert result["reason"] == "duplicate_id"
    assert result["message"] == "A log event with this id already exists"
    assert store.get(result["event_id"]).message == "message-1"
    assert len(sink.events) == 1
    assert metrics.counter("events.duplicate") == 1


def test_ingest_rejects_invalid_payload(make_payload) -> None:
    store = InMemoryEventStore()
    metrics = InMemoryMetrics()
    ingest = create_ingest_event(validator=EventValidator(), store=store, metrics=metrics)

    result = ingest(make_payload(level="OFF"))

    assert result["ok"] is False
    assert result["reason"] == "invalid_level"
    assert "filter settings" in result["message"]
    assert len(store) == 0
    assert metrics.counter("events.rejected.invalid_level") == 1


def test_ingest_survives_failing_sink(make_payload, caplog: pytest.LogCaptureFixture) -> None:
    store = InMemoryEventStore()
    log: list[str] = []
    healthy = _RecordingSink("after", log)
    metrics = InMemoryMetrics()
    ingest = create_ingest_event(
        validator=EventValidator(),
        store=store,
        sinks=[_ExplodingSink(), healthy],
        metrics=metrics,
    )

    with caplog.at_level("WARNING"):
        result = ingest(make_payload(1))

    assert result["ok"] is True
    assert len(healthy.events) == 1
    assert metrics.counter("sinks.errors") == 1
    assert "sink _ExplodingSink failed" in caplog.text


def test_ingest_survives_failing_diagnostic_hook(make_payload) -> None:
    def broken(name: str, payload: dict) -> None:
        raise RuntimeError("hook down")

    ingest = create_ingest_event(validator=EventValidator(), store=InMemoryEventStore(), diagnostic=broken)
    assert ingest(make_payload(1))["ok"] is True


def test_save_or_raise_raises_on_duplicate(make_event) -> None:
    store = InMemoryEventStore()
    event = make_event(1)
    assert save_or_raise(store, event) is event
    with pytest.raises(DuplicateId) as excinfo:
        save_or_raise(store, make_event(1, message="other"))
    assert excinfo.value.event_id == event.event_id


# ---------------------------------------------------------------- clear / shutdown


def test_clear_empties_store_and_is_idempotent(make_event) -> None:
    store = InMemoryEventStore([make_event(index) for index in range(3)])
    metrics = InMemoryMetrics()
    clear = create_clear_events(store=store, metrics=metrics)

    clear()
    clear()

    assert len(store) == 0
    assert metrics.counter("store.cleared") == 2


def test_shutdown_exports_buffer_then_closes_sinks(tmp_path: Path, make_event) -> None:
    log: list[str] = []
    buffer = BoundedBuffer(capacity=5)
    buffer.append(make_event(1))
    target = tmp_path / "buffer.json"
    shutdown = create_shutdown(
        sinks=[_RecordingSink("a", log), _RecordingSink("b", log)],
        buffer=buffer,
        export_path=target,
    )

    shutdown()

    assert json.loads(target.read_text(encoding="utf-8"))[0]["message"] == "message-1"
    assert log == ["close:a", "close:b"]


def test_shutdown_without_export_path_only_closes(make_event) -> None:
    log: list[str] = []
    create_shutdown(sinks=[_RecordingSink("only", log)], buffer=BoundedBuffer(capacity=1))()
    assert log == ["close:only"]

