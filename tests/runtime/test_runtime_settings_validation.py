from __future__ import annotations

from pathlib import Path

import pytest

from lib_log_store import runtime
from lib_log_store.runtime._settings import (
    DEFAULT_BASE_URL,
    build_runtime_settings,
    resolve_base_url,
    resolve_server_address,
)


def test_defaults_without_environment() -> None:
    settings = build_runtime_settings()

    assert settings.enable_buffer is True
    assert settings.buffer_capacity == 1000
    assert settings.remote_url is None
    assert settings.remote_timeout == 15.0
    assert settings.console is False
    assert settings.buffer_export_path is None


def test_environment_overrides_keyword_arguments(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_STORE_BUFFER_CAPACITY", "25")
    monkeypatch.setenv("LOG_STORE_ENABLE_BUFFER", "off")
    monkeypatch.setenv("LOG_STORE_REMOTE_URL", "http://remote/logstore/logs")
    monkeypatch.setenv("LOG_STORE_REMOTE_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_STORE_CONSOLE", "yes")
    monkeypatch.setenv("LOG_STORE_BUFFER_EXPORT", str(tmp_path / "out.json"))

    settings = build_runtime_settings(buffer_capacity=5, enable_buffer=True)

    assert settings.buffer_capacity == 25
    assert settings.enable_buffer is False
    assert settings.remote_url == "http://remote/logstore/logs"
    assert settings.remote_timeout == 2.5
    assert settings.console is True
    assert settings.buffer_export_path == tmp_path / "out.json"


def test_blank_environment_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_STORE_BUFFER_CAPACITY", "  ")
    assert build_runtime_settings(buffer_capacity=7).buffer_capacity == 7


@pytest.mark.parametrize(
    "name, value, error_match",
    [
        ("LOG_STORE_BUFFER_CAPACITY", "many", "LOG_STORE_BUFFER_CAPACITY must be an integer"),
        ("LOG_STORE_BUFFER_CAPACITY", "-1", "cannot be negative"),
        ("LOG_STORE_ENABLE_BUFFER", "maybe", "LOG_STORE_ENABLE_BUFFER must be a boolean"),
        ("LOG_STORE_REMOTE_TIMEOUT", "soon", "LOG_STORE_REMOTE_TIMEOUT must be a number"),
        ("LOG_STORE_REMOTE_TIMEOUT", "0", "must be positive"),
    ],
)
def test_invalid_environment_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str, error_match: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=error_match):
        runtime.init()
    assert not runtime.is_initialised()


def test_server_address_resolution(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_server_address() == ("127.0.0.1", 8080)
    monkeypatch.setenv("LOG_STORE_HOST", "0.0.0.0")
    monkeypatch.setenv("LOG_STORE_PORT", "9000")
    assert resolve_server_address() == ("0.0.0.0", 9000)
    assert resolve_server_address("localhost", 1234) == ("localhost", 1234)


def test_base_url_resolution(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_base_url() == DEFAULT_BASE_URL
    monkeypatch.setenv("LOG_STORE_URL", "http://logs.example:8080/logstore/")
    assert resolve_base_url() == "http://logs.example:8080/logstore"
    assert resolve_base_url("http://other/logstore") == "http://other/logstore"
