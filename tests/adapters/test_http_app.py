from __future__ import annotations

import asyncio
import json
from collections.abc import Iterator
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from lib_log_store.adapters.http import create_app
from lib_log_store.runtime import LogStoreRuntime, RuntimeSettings, build_runtime

LOGS = "/logstore/logs"


@pytest.fixture
def store_runtime() -> LogStoreRuntime:
    return build_runtime(RuntimeSettings(buffer_capacity=3))


@pytest.fixture
def client(store_runtime: LogStoreRuntime) -> Iterator[TestClient]:
    with TestClient(create_app(store_runtime)) as test_client:
        yield test_client


def _post(client: TestClient, payload: object, content_type: str = "application/json"):
    body = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
    return client.post(LOGS, content=body, headers={"Content-Type": content_type})


# ---------------------------------------------------------------- POST


def test_post_stores_event(client: TestClient, store_runtime: LogStoreRuntime, make_payload) -> None:
    response = _post(client, make_payload(1))

    assert response.status_code == 201
    assert store_runtime.store.exists(make_payload(1)["id"])
    assert store_runtime.buffer is not None
    assert len(store_runtime.buffer) == 1


def test_post_accepts_json_with_charset(client: TestClient, make_payload) -> None:
    assert _post(client, make_payload(1), "application/json; charset=UTF-8").status_code == 201


def test_post_without_id_generates_one(client: TestClient, store_runtime: LogStoreRuntime, make_payload) -> None:
    payload = make_payload(1)
    del payload["id"]

    assert _post(client, payload).status_code == 201
    assert len(store_runtime.store.all()) == 1


def test_post_duplicate_is_conflict(client: TestClient, store_runtime: LogStoreRuntime, make_payload) -> None:
    _post(client, make_payload(1))
    response = _post(client, make_payload(1, message="second"))

    assert response.status_code == 409
    assert response.text == "A log event with this id already exists"
    assert store_runtime.store.get(make_payload(1)["id"]).message == "message-1"


def test_post_requires_json_content_type(client: TestClient, make_payload) -> None:
    response = _post(client, make_payload(1), "text/plain")
    assert response.status_code == 400
    assert response.text == "Content-Type must be application/json"


@pytest.mark.parametrize("body", ["{not json", "", "[1, 2]", "\"text\""])
def test_post_invalid_json_is_rejected(client: TestClient, body: str) -> None:
    response = _post(client, body)
    assert response.status_code == 400
    assert response.text == "Invalid JSON format"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"message": None}, "Missing required field: message"),
        ({"id": "not-a-uuid"}, "Invalid UUID format for id"),
        ({"timestamp": "noon"}, "Invalid timestamp format. Expected: ISO-8601 format"),
        ({"level": "LOUD"}, "Invalid log level. Must be one of: TRACE, DEBUG, INFO, WARN, ERROR, FATAL"),
        ({"level": "ALL"}, "Invalid log level. ALL and OFF are filter settings, not valid log levels"),
    ],
)
def test_post_validation_failures(client: TestClient, store_runtime: LogStoreRuntime, make_payload, overrides, message: str) -> None:
    response = _post(client, make_payload(1, **overrides))

    assert response.status_code == 400
    assert response.text == message
    assert store_runtime.store.all() == []


# ---------------------------------------------------------------- GET


def test_get_returns_filtered_events_newest_first(client: TestClient, make_payload) -> None:
    for index, level in enumerate(["DEBUG", "WARN", "ERROR", "INFO"]):
        _post(client, make_payload(index, level=level))

    response = client.get(LOGS, params={"limit": "10", "level": "warn"})

    assert response.status_code == 200
    body = response.json()
    assert [item["level"] for item in body] == ["ERROR", "WARN"]
    assert body[0] == make_payload(2, level="ERROR")


def test_get_respects_limit(client: TestClient, make_payload) -> None:
    for index in range(5):
        _post(client, make_payload(index))
    body = client.get(LOGS, params={"limit": 2, "level": "ALL"}).json()
    assert [item["message"] for item in body] == ["message-4", "message-3"]


def test_get_off_returns_empty_array(client: TestClient, make_payload) -> None:
    _post(client, make_payload(1, level="FATAL"))
    response = client.get(LOGS, params={"limit": 5, "level": "OFF"})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize(
    "params, message",
    [
        ({"level": "INFO"}, "Missing required parameters: limit"),
        ({}, "Missing required parameters: limit"),
        ({"limit": "5"}, "Missing required parameters: level"),
        ({"limit": "abc", "level": "INFO"}, "Invalid limit format"),
        ({"limit": "0", "level": "INFO"}, "Limit must be a positive integer"),
        ({"limit": "-3", "level": "INFO"}, "Limit must be a positive integer"),
        ({"limit": "5", "level": "LOUD"}, "Invalid log level. Must be one of: ALL, TRACE, DEBUG, INFO, WARN, ERROR, FATAL, OFF"),
    ],
)
def test_get_parameter_errors(client: TestClient, params: dict, message: str) -> None:
    response = client.get(LOGS, params=params)
    assert response.status_code == 400
    assert response.text == message


# ---------------------------------------------------------------- DELETE


def test_delete_clears_store(client: TestClient, store_runtime: LogStoreRuntime, make_payload) -> None:
    _post(client, make_payload(1))

    assert client.delete(LOGS).status_code == 200
    assert client.delete(LOGS).status_code == 200
    assert store_runtime.store.all() == []
    assert client.get(LOGS, params={"limit": 5, "level": "ALL"}).json() == []


# ---------------------------------------------------------------- stats


def test_stats_csv(client: TestClient, make_payload) -> None:
    _post(client, make_payload(1, logger="db", level="WARN"))
    _post(client, make_payload(2, logger="db", level="WARN"))

    response = client.get("/logstore/stats/csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.splitlines()
    assert lines[0] == "logger\tALL\tTRACE\tDEBUG\tINFO\tWARN\tERROR\tFATAL\tOFF"
    assert lines[1] == "db\t0\t0\t0\t0\t2\t0\t0\t0"


def test_stats_html(client: TestClient, make_payload) -> None:
    _post(client, make_payload(1, logger="api"))
    response = client.get("/logstore/stats/html")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<td>api</td>" in response.text


def test_stats_excel(client: TestClient, make_payload) -> None:
    _post(client, make_payload(1, logger="api", level="ERROR"))
    response = client.get("/logstore/stats/excel")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    workbook = load_workbook(BytesIO(response.content))
    assert workbook.sheetnames == ["stats"]
    assert list(workbook["stats"].iter_rows(values_only=True))[1] == ("api", 0, 0, 0, 0, 0, 1, 0, 0)


def test_stats_on_empty_store_have_header_only(client: TestClient) -> None:
    assert client.get("/logstore/stats/csv").text.count("\n") == 1


def test_metrics_endpoint_reports_outcomes(client: TestClient, make_payload) -> None:
    _post(client, make_payload(1))
    _post(client, make_payload(1))
    _post(client, make_payload(2, level="OFF"))

    body = client.get("/logstore/metrics").json()

    assert body["counters"]["events.stored"] == 1
    assert body["counters"]["events.duplicate"] == 1
    assert body["counters"]["events.rejected.invalid_level"] == 1
    assert body["gauges"]["buffer.size"] == 1


def test_lifespan_runs_shutdown_callback(store_runtime: LogStoreRuntime) -> None:
    calls: list[str] = []
    with TestClient(create_app(store_runtime, on_shutdown=lambda: calls.append("stopped"))):
        assert calls == []
    assert calls == ["stopped"]


def test_stats_excel_survives_control_characters_in_logger(client: TestClient, make_payload) -> None:
    assert _post(client, make_payload(1, logger="svc\u0001")).status_code == 201

    response = client.get("/logstore/stats/excel")

    assert response.status_code == 200
    rows = list(load_workbook(BytesIO(response.content))["stats"].iter_rows(values_only=True))
    assert rows[1][0] == "svc_x0001_"


def test_post_ingests_outside_the_event_loop(make_payload) -> None:
    seen: list[bool] = []

    def on_stored(name: str, _payload: dict) -> None:
        if name != "stored":
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            seen.append(False)
        else:
            seen.append(True)

    active = build_runtime(RuntimeSettings(diagnostic_hook=on_stored))
    with TestClient(create_app(active)) as test_client:
        assert _post(test_client, make_payload(1)).status_code == 201

    assert seen == [False]
