"""Tests for the session-scoped overlay cache."""

import json

import pytest

from ledgerdesk.database.memory import MemoryStore
from ledgerdesk.database.overlay import ACTIVE_KEY, ENTITY_TYPES, OverlayCache, merge
from ledgerdesk.domain.errors import CacheCorruptionError


class TestNamespace:
    """Tests for namespace creation and session switching."""

    def test_ensure_namespace_creates_all_entity_maps(self, memory_store, cache):
        cache.ensure_namespace("sess-1")

        document = json.loads(memory_store.get("cm_contabilidad_cache_v1:sess-1"))
        assert set(document) == set(ENTITY_TYPES)
        assert all(document[name] == {"byId": {}} for name in ENTITY_TYPES)

    def test_ensure_namespace_is_idempotent(self, cache):
        cache.ensure_namespace("sess-1")
        cache.upsert("sess-1", "accounts", 7, {"id": 7, "name": "Caja"})
        cache.ensure_namespace("sess-1")

        assert cache.read_all("sess-1", "accounts") == {"7": {"id": 7, "name": "Caja"}}

    def test_empty_session_key_is_noop(self, memory_store, cache):
        cache.ensure_namespace("")
        cache.upsert(None, "accounts", 7, {"id": 7})

        assert memory_store.data == {}
        assert cache.read_all(None, "accounts") == {}

    def test_new_session_discards_previous_namespace(self, memory_store, cache):
        cache.ensure_namespace("sess-1")
        cache.upsert("sess-1", "accounts", 7, {"id": 7})

        cache.ensure_namespace("sess-2")

        assert memory_store.get("cm_contabilidad_cache_v1:sess-1") is None
        assert memory_store.get(ACTIVE_KEY) == "sess-2"
        assert cache.read_all("sess-1", "accounts") == {}

    def test_clear_removes_namespace(self, memory_store, cache):
        cache.ensure_namespace("sess-1")
        cache.upsert("sess-1", "cost_centers", 3, {"id": 3})

        cache.clear("sess-1")

        assert cache.read_all("sess-1", "cost_centers") == {}
        assert memory_store.get(ACTIVE_KEY) is None


class TestUpsertAndRead:
    """Tests for writing and reading entries."""

    def test_upsert_ignores_falsy_id(self, cache):
        cache.ensure_namespace("sess-1")
        cache.upsert("sess-1", "accounts", None, {"name": "no id"})
        cache.upsert("sess-1", "accounts", 0, {"name": "zero"})

        assert cache.read_all("sess-1", "accounts") == {}

    def test_upsert_overwrites_and_moves_to_end(self, cache):
        cache.ensure_namespace("sess-1")
        cache.upsert("sess-1", "accounts", 1, {"id": 1, "name": "a"})
        cache.upsert("sess-1", "accounts", 2, {"id": 2, "name": "b"})
        cache.upsert("sess-1", "accounts", 1, {"id": 1, "name": "a2"})

        entries = cache.read_all("sess-1", "accounts")
        assert list(entries) == ["2", "1"]
        assert entries["1"]["name"] == "a2"

    def test_decimal_and_date_values_are_serialized(self, cache):
        from datetime import date
        from decimal import Decimal

        cache.ensure_namespace("sess-1")
        cache.upsert("sess-1", "transactions", 5, {"id": 5, "date": date(2026, 1, 20), "total": Decimal("10.50")})

        entry = cache.read_all("sess-1", "transactions")["5"]
        assert entry["date"] == "2026-01-20"
        assert entry["total"] == "10.50"

    def test_survives_in_sqlite_store(self, temp_store):
        OverlayCache(temp_store).ensure_namespace("sess-1")
        OverlayCache(temp_store).upsert("sess-1", "accounts", 7, {"id": 7, "code": "1.1"})

        assert OverlayCache(temp_store).read_all("sess-1", "accounts") == {"7": {"id": 7, "code": "1.1"}}


class TestCorruption:
    """Corrupt content reads as an empty cache and self-heals."""

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '{"accounts": []}', '{"accounts": {"byId": 3}}', '{"accounts": null}'])
    def test_corrupt_content_reads_empty(self, raw):
        store = MemoryStore({"cm_contabilidad_cache_v1:sess-1": raw})
        cache = OverlayCache(store)

        assert cache.read_all("sess-1", "accounts") == {}
        assert store.get("cm_contabilidad_cache_v1:sess-1") is None

    def test_decode_raises_cache_corruption_error(self, cache):
        with pytest.raises(CacheCorruptionError):
            cache._decode("{not json")

    def test_upsert_after_corruption_starts_fresh(self):
        store = MemoryStore({"cm_contabilidad_cache_v1:sess-1": "garbage"})
        cache = OverlayCache(store)

        cache.upsert("sess-1", "accounts", 7, {"id": 7})

        assert cache.read_all("sess-1", "accounts") == {"7": {"id": 7}}

    def test_upsert_over_null_section_starts_fresh(self):
        store = MemoryStore({"cm_contabilidad_cache_v1:sess-1": '{"accounts": null, "cost_centers": {"byId": {"3": {"id": 3}}}}'})
        cache = OverlayCache(store)

        cache.upsert("sess-1", "accounts", 7, {"id": 7})

        assert cache.read_all("sess-1", "accounts") == {"7": {"id": 7}}
        assert cache.read_all("sess-1", "cost_centers") == {}


class TestMerge:
    """Tests for overlaying cached records on a server page."""

    def test_cached_fields_win(self):
        server = [{"id": 7, "name": "server", "code": "1"}]
        cached = {"7": {"id": 7, "name": "cached", "metadata": {"tag": "x"}}}

        merged = merge(server, cached)

        assert merged == [{"id": 7, "name": "cached", "code": "1", "metadata": {"tag": "x"}}]

    def test_cache_only_records_are_prepended_most_recent_first(self):
        server = [{"id": 1, "name": "a"}]
        cached = {"5": {"id": 5, "name": "older"}, "6": {"id": 6, "name": "newer"}}

        merged = merge(server, cached)

        assert [r["id"] for r in merged] == [6, 5, 1]

    def test_include_predicate_filters_cache_only_records(self):
        cached = {
            "5": {"id": 5, "register_status": "Inactivo"},
            "6": {"id": 6, "register_status": "Activo"},
        }

        merged = merge([], cached, include=lambda r: r["register_status"] != "Inactivo")

        assert [r["id"] for r in merged] == [6]

    def test_records_without_id_are_dropped_and_duplicates_collapse(self):
        server = [{"id": 1, "name": "a"}, {"name": "orphan"}, {"id": 1, "code": "dup"}]

        merged = merge(server, {})

        assert merged == [{"id": 1, "name": "a", "code": "dup"}]

    def test_merge_is_idempotent(self):
        server = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        cached = {"2": {"id": 2, "name": "b2"}, "9": {"id": 9, "name": "new"}}

        assert merge(server, cached) == merge(server, cached)

    def test_merge_does_not_mutate_inputs(self):
        server = [{"id": 1, "name": "a"}]
        cached = {"1": {"id": 1, "metadata": {"k": "v"}}}

        merge(server, cached)

        assert server == [{"id": 1, "name": "a"}]
        assert cached == {"1": {"id": 1, "metadata": {"k": "v"}}}
