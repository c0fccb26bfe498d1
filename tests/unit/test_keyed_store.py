"""
Keyed store tests.

Validates that both backends:
1. Read missing keys as None
2. Apply update() atomically per key (no lost read-modify-write)
3. Expire entries after their TTL
4. Are interchangeable behind KeyedStore
"""

import asyncio
import tempfile
from pathlib import Path

import pytest

from agent.memory import InMemoryKeyedStore, KeyedStore, SQLiteKeyedStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class YieldingStore(InMemoryKeyedStore):
    """Yields to the loop between read and write, like a networked store would."""

    async def _read(self, key):
        await asyncio.sleep(0)
        return await super()._read(key)


# ═══════════════════════════════════════════════════════════════════════════════
# IN-MEMORY BACKEND
# ═══════════════════════════════════════════════════════════════════════════════


class TestInMemoryKeyedStore:

    def test_is_keyed_store(self):
        assert isinstance(InMemoryKeyedStore(), KeyedStore)

    @pytest.mark.asyncio
    async def test_missing_key_reads_none(self):
        store = InMemoryKeyedStore()
        assert await store.get("nobody") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self):
        store = InMemoryKeyedStore()
        await store.set("USER_1", {"name": "Alice"})
        assert await store.get("USER_1") == {"name": "Alice"}

    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        """Mutating a returned value never changes the stored one."""
        store = InMemoryKeyedStore()
        await store.set("USER_1", ["London, uk"])

        value = await store.get("USER_1")
        value.append("Tokyo, jp")

        assert await store.get("USER_1") == ["London, uk"]

    @pytest.mark.asyncio
    async def test_update_receives_none_for_missing_key(self):
        store = InMemoryKeyedStore()
        seen = []

        def mutator(current):
            seen.append(current)
            return 1

        assert await store.update("counter", mutator) == 1
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self):
        store = YieldingStore()

        async def increment():
            await store.update("counter", lambda current: (current or 0) + 1)

        await asyncio.gather(*(increment() for _ in range(50)))

        assert await store.get("counter") == 50
        assert len(store._locks) == 0

    @pytest.mark.asyncio
    async def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        store = InMemoryKeyedStore(ttl_seconds=60, clock=clock)
        await store.set("london, uk", {"low": "50"})

        clock.now += 59
        assert await store.get("london, uk") == {"low": "50"}

        clock.now += 1
        assert await store.get("london, uk") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete(self):
        store = InMemoryKeyedStore()
        await store.set("USER_1", True)
        await store.delete("USER_1")
        await store.delete("USER_1")
        assert await store.get("USER_1") is None


# ═══════════════════════════════════════════════════════════════════════════════
# SQLITE BACKEND
# ═══════════════════════════════════════════════════════════════════════════════


class TestSQLiteKeyedStore:

    @pytest.mark.asyncio
    async def test_set_get_roundtrip_in_memory(self):
        store = SQLiteKeyedStore("profiles")
        await store.set("USER_1", "Alice")
        assert await store.get("USER_1") == "Alice"
        assert await store.get("USER_2") is None

    @pytest.mark.asyncio
    async def test_upsert_overwrites(self):
        store = SQLiteKeyedStore("profiles")
        await store.set("USER_1", "Alice")
        await store.set("USER_1", "Alicia")
        assert await store.get("USER_1") == "Alicia"

    @pytest.mark.asyncio
    async def test_state_survives_new_instance(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = str(Path(tmpdir) / "state.db")

            first = SQLiteKeyedStore("location_history", db_path=db_path)
            await first.update("USER_1", lambda current: (current or []) + ["London, uk"])

            second = SQLiteKeyedStore("location_history", db_path=db_path)
            assert await second.get("USER_1") == ["London, uk"]

    @pytest.mark.asyncio
    async def test_namespaces_are_isolated(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = str(Path(tmpdir) / "state.db")
            profiles = SQLiteKeyedStore("profiles", db_path=db_path)
            pending = SQLiteKeyedStore("pending_follow_up", db_path=db_path)

            await profiles.set("USER_1", "Alice")

            assert await pending.get("USER_1") is None
            assert await profiles.get("USER_1") == "Alice"

    @pytest.mark.asyncio
    async def test_expired_entry_reads_none(self):
        store = SQLiteKeyedStore("weather_info", ttl_seconds=0)
        await store.set("london, uk", {"low": "50"})
        assert await store.get("london, uk") is None

    @pytest.mark.asyncio
    async def test_delete_and_clear(self):
        store = SQLiteKeyedStore("states")
        await store.set("USER_1", "greeted")
        await store.set("USER_2", "ended")

        await store.delete("USER_1")
        assert await store.get("USER_1") is None

        store.clear()
        assert await store.get("USER_2") is None

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self):
        store = SQLiteKeyedStore("counters")

        async def increment():
            await store.update("counter", lambda current: (current or 0) + 1)

        await asyncio.gather(*(increment() for _ in range(20)))

        assert await store.get("counter") == 20
        assert len(store._locks) == 0
