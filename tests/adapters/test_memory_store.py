from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from lib_log_store.adapters.memory_store import InMemoryEventStore
from lib_log_store.application.ports.store import SaveOutcome


def test_save_then_duplicate_leaves_store_unchanged(make_event) -> None:
    store = InMemoryEventStore()
    original = make_event(1, message="original")

    assert store.save(original) is SaveOutcome.STORED
    assert store.save(make_event(1, message="impostor")) is SaveOutcome.DUPLICATE

    assert len(store) == 1
    assert store.get(original.event_id).message == "original"


def test_all_returns_insertion_ordered_snapshot(make_event) -> None:
    store = InMemoryEventStore([make_event(2), make_event(0), make_event(1)])
    snapshot = store.all()
    store.save(make_event(3))

    assert [event.message for event in snapshot] == ["message-2", "message-0", "message-1"]
    assert len(store.all()) == 4


def test_get_and_exists_for_missing_ids() -> None:
    store = InMemoryEventStore()
    assert store.get("missing") is None
    assert not store.exists("missing")
    assert "missing" not in store


def test_delete_and_clear_are_idempotent(make_event) -> None:
    store = InMemoryEventStore([make_event(0), make_event(1)])
    store.delete(make_event(0).event_id)
    store.delete(make_event(0).event_id)
    assert [event.message for event in store.all()] == ["message-1"]

    store.clear()
    store.clear()
    assert store.all() == []


def test_concurrent_saves_with_one_id_store_exactly_once(make_event) -> None:
    store = InMemoryEventStore()
    candidates = [make_event(7, message=f"writer-{index}") for index in range(64)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(store.save, candidates))

    assert outcomes.count(SaveOutcome.STORED) == 1
    assert outcomes.count(SaveOutcome.DUPLICATE) == 63
    assert len(store) == 1


def test_concurrent_saves_with_distinct_ids_all_succeed(make_event) -> None:
    store = InMemoryEventStore()
    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(store.save, [make_event(index) for index in range(200)]))
    assert all(outcome is SaveOutcome.STORED for outcome in outcomes)
    assert len(store) == 200
