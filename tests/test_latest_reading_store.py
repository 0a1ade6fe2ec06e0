"""Unit tests for the single-slot latest reading store."""

from __future__ import annotations

from datastore.latest_reading import LatestReadingStore, build_default_store


def test_empty_store_returns_empty_payload() -> None:
    assert LatestReadingStore().get() == {}


def test_set_and_get_returns_copy() -> None:
    store = LatestReadingStore()
    original = {"voltage": 3.3, "current": 0.5, "time": "2024-01-01T00:00:00+00:00"}

    store.set(original)
    fetched = store.get()

    assert fetched == original
    assert fetched is not original

    # Mutating either side must not affect the stored payload.
    fetched["voltage"] = 0.0
    original["current"] = 9.9
    assert store.get() == {"voltage": 3.3, "current": 0.5, "time": "2024-01-01T00:00:00+00:00"}


def test_set_replaces_previous_payload() -> None:
    store = LatestReadingStore()
    store.set({"voltage": 3.3, "current": 0.5})
    store.set({"voltage": 2.9, "current": 0.4})

    assert store.get() == {"voltage": 2.9, "current": 0.4}


def test_clear_empties_store() -> None:
    store = LatestReadingStore()
    store.set({"voltage": 3.3, "current": 0.5})

    store.clear()

    assert store.get() == {}


def test_default_store_is_shared() -> None:
    build_default_store.cache_clear()
    try:
        assert build_default_store() is build_default_store()
    finally:
        build_default_store.cache_clear()
