"""Tests for the key-value store implementations."""

import pytest

from ledgerdesk.database.factories import create_sqlite_store
from ledgerdesk.database.memory import MemoryStore


@pytest.fixture(params=["memory", "sqlite"])
def store(request, temp_store):
    if request.param == "memory":
        return MemoryStore()
    return temp_store


def test_get_missing_returns_none(store):
    assert store.get("missing") is None


def test_set_then_get(store):
    store.set("k", "v1")
    store.set("k", "v2")

    assert store.get("k") == "v2"


def test_remove_ignores_missing_key(store):
    store.set("k", "v")
    store.remove("k")
    store.remove("k")

    assert store.get("k") is None


def test_sqlite_store_persists_across_instances(temp_store):
    temp_store.set("k", "v")

    reopened = create_sqlite_store(cache_path=temp_store.cache_path)
    try:
        assert reopened.get("k") == "v"
    finally:
        reopened.disconnect()


def test_factory_reads_environment_variable(tmp_path, monkeypatch):
    cache_path = tmp_path / "env-cache.db"
    monkeypatch.setenv("LEDGERDESK_CACHE_PATH", str(cache_path))

    store = create_sqlite_store()
    try:
        assert store.database_url == f"sqlite:///{cache_path}"
    finally:
        store.disconnect()
