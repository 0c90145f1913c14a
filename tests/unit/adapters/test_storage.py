"""
Storage Adapter 모듈 단위 테스트

이 모듈은 메모리 및 SQLite 키-값 저장소의 기능을 테스트합니다.
"""

import os

import pytest

from district_alerts.adapters.storage.memory_kv import MemoryKVStore
from district_alerts.adapters.storage.sqlite_kv import SQLiteKVStore


class TestMemoryKVStore:
    """메모리 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await MemoryKVStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_set_get_delete(self):
        store = MemoryKVStore()
        await store.set("k", "v1")
        await store.set("k", "v2")
        assert await store.get("k") == "v2"
        await store.delete("k")
        await store.delete("k")
        assert await store.get("k") is None

    def test_initial_copied(self):
        initial = {"k": "v"}
        store = MemoryKVStore(initial)
        store.data["k"] = "changed"
        assert initial["k"] == "v"


class TestSQLiteKVStore:
    """SQLite 저장소 테스트"""

    @pytest.fixture
    async def store(self, temp_db_path):
        store = SQLiteKVStore(temp_db_path)
        await store.init()
        return store

    @pytest.mark.asyncio
    async def test_init_creates_file(self, store):
        assert os.path.exists(store.path)
        assert await store.get("boundary:x:geojson") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        await store.set("boundary:x:timestamp", "1760832000000")
        assert await store.get("boundary:x:timestamp") == "1760832000000"

    @pytest.mark.asyncio
    async def test_set_replaces_whole_value(self, store):
        await store.set("k", "a" * 1000)
        await store.set("k", "b")
        assert await store.get("k") == "b"

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.set("k", "v")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, store, temp_db_path):
        await store.set("k", "v")
        other = SQLiteKVStore(temp_db_path)
        await other.init()
        assert await other.get("k") == "v"
