"""Key-value snapshot stores.

Progress is persisted as two JSON documents, one per namespace
(``task-storage`` and ``user-storage``). Any backend that can get, set and
delete string values by key satisfies the KVStore protocol:

- InMemoryKVStore: process-local dict, used by tests and ``STORAGE_BACKEND=memory``
- SQLiteKVStore: single ``kv_store`` table in a local SQLite file (aiosqlite)
- RedisKVStore: plain Redis strings under a configurable key prefix

Backends raise StorageError for any failure of the underlying driver; callers
decide whether a failure is fatal.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from datetime import UTC, datetime
from functools import wraps
from pathlib import Path
from typing import Any, Protocol, TypeVar

import aiosqlite
from redis.asyncio import Redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import RedisError

from habitforge.core.config import Constants, Settings, settings


logger = logging.getLogger(__name__)

T = TypeVar("T")

_KV_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated TEXT NOT NULL
)
"""


class StorageError(RuntimeError):
    """Raised when a key-value backend cannot complete an operation."""


class KVStore(Protocol):
    """Protocol for durable key-value storage of JSON snapshots."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    async def delete(self, *keys: str) -> None:
        """Remove keys. Missing keys are ignored."""
        ...

    async def close(self) -> None:
        """Release any connection held by the store."""
        ...

    def get_health_status(self) -> dict[str, Any]:
        """Backend name plus backend-specific connection and failure details."""
        ...


class InMemoryKVStore:
    """In-memory key-value store."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._data: dict[str, str] = {}
        self._total_operations = 0

    def get_health_status(self) -> dict[str, Any]:
        """Get store health status."""
        return {
            "backend": "memory",
            "connected": True,
            "total_operations": self._total_operations,
            "entries": len(self._data),
        }

    async def get(self, key: str) -> str | None:
        self._total_operations += 1
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._total_operations += 1
        self._data[key] = value

    async def delete(self, *keys: str) -> None:
        self._total_operations += 1
        for key in keys:
            self._data.pop(key, None)

    async def close(self) -> None:
        return None


class SQLiteKVStore:
    """SQLite-backed key-value store using a single ``kv_store`` table."""

    def __init__(self, db_path: str | Path) -> None:
        """Initialize store for the given database file. The connection opens lazily."""
        self._path = Path(db_path).resolve()
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_health_status(self) -> dict[str, Any]:
        """Get store health status."""
        return {
            "backend": "sqlite",
            "db_path": str(self._path),
            "connected": self._conn is not None,
        }

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create the connection, creating the table on first use."""
        if self._conn is not None:
            return self._conn

        async with self._lock:
            # Double-check after acquiring lock
            if self._conn is not None:
                return self._conn

            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                conn = await aiosqlite.connect(str(self._path))
                await conn.execute("PRAGMA journal_mode = WAL")
                await conn.execute(_KV_TABLE_SCHEMA)
                await conn.commit()
            except (aiosqlite.Error, OSError) as e:
                logger.error("sqlite_connect_failed", extra={"db_path": str(self._path), "error": str(e)})
                msg = f"Failed to open SQLite storage at {self._path}: {e}"
                raise StorageError(msg) from e

            self._conn = conn
            logger.info("Created new SQLite connection", extra={"db_path": str(self._path)})
            return conn

    async def get(self, key: str) -> str | None:
        conn = await self._get_connection()
        try:
            cursor = await conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            logger.error("kv_get_failed", extra={"key": key, "error": str(e)})
            msg = f"Failed to read {key} from SQLite storage: {e}"
            raise StorageError(msg) from e

        return None if row is None else row[0]

    async def set(self, key: str, value: str) -> None:
        conn = await self._get_connection()
        try:
            await conn.execute(
                "INSERT INTO kv_store (key, value, updated) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated = excluded.updated",
                (key, value, datetime.now(UTC).isoformat()),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            logger.error("kv_set_failed", extra={"key": key, "error": str(e)})
            msg = f"Failed to write {key} to SQLite storage: {e}"
            raise StorageError(msg) from e

        logger.debug("Stored key", extra={"key": key, "size": len(value)})

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        conn = await self._get_connection()
        placeholders = ", ".join("?" for _ in keys)
        try:
            await conn.execute(f"DELETE FROM kv_store WHERE key IN ({placeholders})", keys)  # noqa: S608 - placeholders only
            await conn.commit()
        except aiosqlite.Error as e:
            logger.error("kv_delete_failed", extra={"keys": list(keys), "error": str(e)})
            msg = f"Failed to delete {', '.join(keys)} from SQLite storage: {e}"
            raise StorageError(msg) from e

    async def close(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.close()
            logger.info("Closed SQLite connection", extra={"db_path": str(self._path)})
        except aiosqlite.Error as e:
            logger.warning("Error closing SQLite connection", extra={"error": str(e)})
        finally:
            self._conn = None


def with_retry(
    max_retries: int = Constants.REDIS_MAX_RETRIES, base_delay: float = Constants.REDIS_RETRY_BASE_DELAY_SECONDS
) -> Callable[[Callable[..., Coroutine[Any, Any, T]]], Callable[..., Coroutine[Any, Any, T]]]:
    """Decorator to retry async Redis calls with exponential backoff.

    Args:
        max_retries: Maximum number of attempts
        base_delay: Base delay in seconds for exponential backoff

    Returns:
        Decorated function that raises StorageError once all attempts fail
    """

    def decorator(func: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., Coroutine[Any, Any, T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:  # noqa: ANN401
            last_exception: RedisError | None = None
            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except RedisError as e:
                    last_exception = e
                    if attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            "Redis operation failed (attempt %d/%d): %s. Retrying in %.2fs",
                            attempt + 1,
                            max_retries,
                            e,
                            delay,
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error("Redis operation failed after %d attempts: %s", max_retries, e)
            msg = f"Redis storage operation {func.__name__} failed: {last_exception}"
            raise StorageError(msg) from last_exception

        return wrapper

    return decorator


class RedisKVStore:
    """Redis-backed key-value store with connection pooling."""

    def __init__(self, redis_url: str, *, key_prefix: str = "habitforge", client: Redis | None = None) -> None:
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL
            key_prefix: Prefix prepended to every key (``prefix:key``)
            client: Pre-built client, mainly for tests
        """
        self._prefix = key_prefix
        self._pool: ConnectionPool | None = None
        if client is not None:
            self._client = client
        else:
            self._pool = ConnectionPool.from_url(
                redis_url,
                decode_responses=True,
                max_connections=Constants.REDIS_MAX_CONNECTIONS,
            )
            self._client = Redis(connection_pool=self._pool)
            logger.info("Redis storage initialized with URL: %s", redis_url)

        # Health tracking
        self._last_successful_operation: datetime | None = None
        self._failure_count = 0

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    def get_health_status(self) -> dict[str, Any]:
        """Get Redis health status."""
        return {
            "backend": "redis",
            "last_successful_operation": self._last_successful_operation.isoformat()
            if self._last_successful_operation
            else None,
            "failure_count": self._failure_count,
        }

    def _record_success(self) -> None:
        self._last_successful_operation = datetime.now(UTC)

    async def get(self, key: str) -> str | None:
        @with_retry()
        async def _get() -> str | None:
            return await self._client.get(self._key(key))

        try:
            value = await _get()
        except StorageError:
            self._failure_count += 1
            raise
        self._record_success()
        if isinstance(value, bytes):
            return value.decode()
        return value

    async def set(self, key: str, value: str) -> None:
        @with_retry()
        async def _set() -> None:
            await self._client.set(self._key(key), value)

        try:
            await _set()
        except StorageError:
            self._failure_count += 1
            raise
        self._record_success()
        logger.debug("Stored key: %s", key)

    async def delete(self, *keys: str) -> None:
        if not keys:
            return

        @with_retry()
        async def _delete() -> None:
            await self._client.delete(*(self._key(k) for k in keys))

        try:
            await _delete()
        except StorageError:
            self._failure_count += 1
            raise
        self._record_success()

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis storage closed")


def create_kv_store(config: Settings | None = None) -> KVStore:
    """Build the key-value store selected by ``storage_backend``.

    Raises:
        ValueError: If the redis backend is selected without REDIS_URL
    """
    config = config or settings

    if config.storage_backend == "memory":
        logger.info("Using in-memory storage; progress will not survive restarts")
        return InMemoryKVStore()

    if config.storage_backend == "redis":
        redis_url = config.require_credential("redis_url", "Redis")
        return RedisKVStore(redis_url, key_prefix=config.redis_key_prefix)

    return SQLiteKVStore(config.sqlite_db_path)
