"""
SQLite-backed keyed store.

A durable drop-in for InMemoryKeyedStore so conversation state survives
restarts. Several stores share one database file, separated by namespace.

Key properties:
- Implements exactly the same interface as InMemoryKeyedStore
- Can be swapped without changing any conversation code
- Values stored as JSON text
- Optional TTL enforced on read
"""

import asyncio
import json
import logging
import sqlite3
import time
import weakref
from typing import Any, Optional

from agent.memory.base import KeyedStore, Mutator

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Backing database could not be read or written."""
    pass


class SQLiteKeyedStore(KeyedStore):
    """
    SQLite keyed store.

    Design:
    - One table: keyed_store
    - Columns: namespace, key, data (JSON), expires_at, updated_at
    - Primary key: (namespace, key)
    """

    def __init__(
        self,
        namespace: str,
        db_path: Optional[str] = None,
        ttl_seconds: Optional[float] = None,
    ):
        """
        Initialize SQLite keyed store.

        Args:
            namespace: Logical store name (e.g. "profiles", "history")
            db_path: Path to SQLite database file.
                     If None, uses ':memory:' with one shared connection.
            ttl_seconds: Entry lifetime; None means entries never expire
        """
        self.namespace = namespace
        self.db_path = db_path or ":memory:"
        self.ttl_seconds = ttl_seconds
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
        # An in-memory database lives only as long as its connection
        self._shared_conn: Optional[sqlite3.Connection] = None
        if self.db_path == ":memory:":
            self._shared_conn = sqlite3.connect(":memory:", check_same_thread=False)
        self._initialize_db()

    def _connect(self) -> sqlite3.Connection:
        if self._shared_conn is not None:
            return self._shared_conn
        return sqlite3.connect(self.db_path)

    def _release(self, conn: sqlite3.Connection) -> None:
        if conn is not self._shared_conn:
            conn.close()

    def _initialize_db(self) -> None:
        """Create the schema. No-op when it already exists."""
        conn = self._connect()
        try:
            cursor = conn.cursor()
            if self._shared_conn is None:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS keyed_store (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    data TEXT NOT NULL,
                    expires_at REAL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (namespace, key)
                )
            """)
            conn.commit()
            logger.debug(f"SQLite store initialized: {self.db_path} namespace={self.namespace}")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize SQLite store: {str(e)}")
            raise StoreUnavailableError(f"Store initialization failed: {e}") from e
        finally:
            self._release(conn)

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def _read(self, key: str) -> Optional[Any]:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT data, expires_at FROM keyed_store
                WHERE namespace = ? AND key = ?
                """,
                (self.namespace, key),
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"SQLite error during read: namespace={self.namespace}, {str(e)}")
            raise StoreUnavailableError(f"Store read failed: {e}") from e
        finally:
            self._release(conn)

        if row is None:
            return None

        data, expires_at = row
        if expires_at is not None and time.time() >= expires_at:
            logger.debug(f"Expired entry: namespace={self.namespace}, key={key}")
            return None

        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted store data: namespace={self.namespace}, key={key}, {str(e)}")
            return None

    def _write(self, key: str, value: Any) -> None:
        data_json = json.dumps(value)
        expires_at = None
        if self.ttl_seconds is not None:
            expires_at = time.time() + self.ttl_seconds

        conn = self._connect()
        try:
            cursor = conn.cursor()
            # Upsert
            cursor.execute(
                """
                INSERT INTO keyed_store (namespace, key, data, expires_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(namespace, key)
                DO UPDATE SET data = excluded.data,
                              expires_at = excluded.expires_at,
                              updated_at = CURRENT_TIMESTAMP
                """,
                (self.namespace, key, data_json, expires_at),
            )
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"SQLite error during write: namespace={self.namespace}, {str(e)}")
            raise StoreUnavailableError(f"Store write failed: {e}") from e
        finally:
            self._release(conn)

    async def get(self, key: str) -> Optional[Any]:
        return self._read(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock_for(key):
            self._write(key, value)

    async def update(self, key: str, mutator: Mutator) -> Any:
        async with self._lock_for(key):
            new_value = mutator(self._read(key))
            self._write(key, new_value)
            return new_value

    async def delete(self, key: str) -> None:
        async with self._lock_for(key):
            conn = self._connect()
            try:
                conn.execute(
                    "DELETE FROM keyed_store WHERE namespace = ? AND key = ?",
                    (self.namespace, key),
                )
                conn.commit()
            except sqlite3.Error as e:
                logger.error(f"SQLite error during delete: namespace={self.namespace}, {str(e)}")
                raise StoreUnavailableError(f"Store delete failed: {e}") from e
            finally:
                self._release(conn)

    def clear(self) -> None:
        """Remove every entry in this namespace."""
        conn = self._connect()
        try:
            conn.execute("DELETE FROM keyed_store WHERE namespace = ?", (self.namespace,))
            conn.commit()
        finally:
            self._release(conn)
