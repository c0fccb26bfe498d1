"""
In-memory keyed store.

Process-local, deterministic, no external dependencies.
Default backend and the one used by tests.
"""

import asyncio
import copy
import logging
import time
import weakref
from typing import Any, Callable, Dict, Optional, Tuple

from agent.memory.base import KeyedStore, Mutator

logger = logging.getLogger(__name__)


class InMemoryKeyedStore(KeyedStore):
    """
    Dict-backed keyed store with per-key locks and optional TTL.

    Properties:
    - update() holds the key's lock across read, mutate and write
    - Values are deep-copied on the way in and out, so callers never
      share mutable state with the store
    - ttl_seconds=None means entries never expire
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "store",
    ):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def _read(self, key: str) -> Optional[Any]:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            self._data.pop(key, None)
            logger.debug(f"[{self.name}] expired key={key}")
            return None
        return copy.deepcopy(value)

    async def _write(self, key: str, value: Any) -> None:
        expires_at = None
        if self.ttl_seconds is not None:
            expires_at = self._clock() + self.ttl_seconds
        self._data[key] = (copy.deepcopy(value), expires_at)

    async def get(self, key: str) -> Optional[Any]:
        return await self._read(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock_for(key):
            await self._write(key, value)

    async def update(self, key: str, mutator: Mutator) -> Any:
        async with self._lock_for(key):
            current = await self._read(key)
            new_value = mutator(current)
            await self._write(key, new_value)
            return copy.deepcopy(new_value)

    async def delete(self, key: str) -> None:
        async with self._lock_for(key):
            self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)
