"""Tests for the KeyValueStore adapters."""

from __future__ import annotations

import pytest

from transcript_search.core.exceptions import CollaboratorError
from transcript_search.domain.ports import KeyValueStore
from transcript_search.infrastructure.persistence import InMemoryKeyValueStore, JsonFileKeyValueStore


@pytest.fixture(params=["memory", "json"])
def kv_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(tmp_path)


class TestKeyValueStoreContract:
    def test_implements_port(self, kv_store):
        assert isinstance(kv_store, KeyValueStore)

    async def test_set_get_delete(self, kv_store):
        await kv_store.set("history:economy", {"frequency": 2})
        assert await kv_store.get("history:economy") == {"frequency": 2}
        await kv_store.delete("history:economy")
        assert await kv_store.get("history:economy") is None

    async def test_delete_missing_key(self, kv_store):
        await kv_store.delete("nope")

    async def test_keys_by_prefix_sorted(self, kv_store):
        for key in ("history:b", "history:a", "settings:theme"):
            await kv_store.set(key, 1)
        assert await kv_store.keys("history:") == ["history:a", "history:b"]
        assert len(await kv_store.keys()) == 3

    async def test_any_string_is_a_valid_key(self, kv_store):
        key = "history:what did POTUS say? / 50% ü"
        await kv_store.set(key, {"ok": True})
        assert await kv_store.get(key) == {"ok": True}
        assert await kv_store.keys("history:what") == [key]

    async def test_returned_values_are_copies(self, kv_store):
        await kv_store.set("k", {"items": [1]})
        value = await kv_store.get("k")
        value["items"].append(2)
        assert await kv_store.get("k") == {"items": [1]}


class TestJsonFileStore:
    async def test_survives_reopen(self, tmp_path):
        await JsonFileKeyValueStore(tmp_path).set("history:tax", {"frequency": 3})
        assert await JsonFileKeyValueStore(tmp_path).get("history:tax") == {"frequency": 3}

    async def test_files_live_under_kv(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path)
        await store.set("a", 1)
        assert store.root == tmp_path / "kv"
        assert [p.name for p in store.root.iterdir()] == ["a.json"]

    async def test_corrupt_file_reads_as_missing(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path)
        (store.root / "broken.json").write_text("{not json", encoding="utf-8")
        assert await store.get("broken") is None

    async def test_unserializable_value(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(CollaboratorError) as exc_info:
            await store.set("k", {"bad": object()})
        assert exc_info.value.context.collaborator == "json_file_store"
