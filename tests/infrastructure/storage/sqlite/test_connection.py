"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from buildstock.infrastructure.storage.sqlite import connection as conn_module
from buildstock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


@pytest.fixture
async def counter_db(temp_db_path: Path) -> Path:
    """Database with a single counter row."""
    async with aiosqlite.connect(temp_db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("CREATE TABLE counter (id INTEGER PRIMARY KEY, value INTEGER)")
        await conn.execute("INSERT INTO counter (id, value) VALUES (1, 0)")
        await conn.commit()
    return temp_db_path


async def _value(pool: ConnectionPool) -> int:
    async with pool.acquire() as conn:
        cursor = await conn.execute("SELECT value FROM counter WHERE id = 1")
        return (await cursor.fetchone())["value"]


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False
        assert pool._connections == []

    async def test_initialize_creates_directory(self, tmp_path: Path):
        """Initialize creates database directory if not exists."""
        db_path = tmp_path / "nested" / "ledger.db"
        pool = ConnectionPool(db_path, pool_size=1)
        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_idempotent(self, temp_db_path: Path):
        """Multiple initialize calls create pool_size connections once."""
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.initialize()
        assert len(pool._connections) == 2
        assert pool._pool.qsize() == 2
        await pool.close()


class TestConnectionPragmas:
    """Tests for per-connection settings."""

    async def test_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, busy_timeout=1234)
        conn = await pool._create_connection()
        try:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0].lower() == "wal"
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234
            assert conn.row_factory == aiosqlite.Row
        finally:
            await conn.close()


class TestConnectionPoolAcquire:
    """Tests for ConnectionPool.acquire()."""

    async def test_acquire_returns_connection_to_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        async with pool.acquire():
            assert pool._pool.qsize() == 0
        assert pool._pool.qsize() == 1
        await pool.close()

    async def test_acquire_returns_on_exception(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        with pytest.raises(ValueError):
            async with pool.acquire():
                raise ValueError("boom")
        assert pool._pool.qsize() == 1
        await pool.close()

    async def test_acquire_blocks_when_pool_exhausted(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        async with pool.acquire():
            with pytest.raises(asyncio.TimeoutError):
                async with asyncio.timeout(0.1):
                    async with pool.acquire():
                        pass

        await pool.close()


class TestConnectionPoolTransaction:
    """Tests for ConnectionPool.transaction()."""

    async def test_commits_on_success(self, counter_db: Path):
        pool = ConnectionPool(counter_db, pool_size=1)
        async with pool.transaction() as conn:
            await conn.execute("UPDATE counter SET value = 5 WHERE id = 1")
        assert await _value(pool) == 5
        await pool.close()

    async def test_rolls_back_on_exception(self, counter_db: Path):
        pool = ConnectionPool(counter_db, pool_size=1)
        with pytest.raises(ValueError):
            async with pool.transaction(immediate=True) as conn:
                await conn.execute("UPDATE counter SET value = 9 WHERE id = 1")
                raise ValueError("force rollback")
        assert await _value(pool) == 0
        await pool.close()

    async def test_immediate_transactions_serialize(self, counter_db: Path):
        """Read-modify-write under BEGIN IMMEDIATE loses no increments."""
        pool = ConnectionPool(counter_db, pool_size=4, busy_timeout=5000)

        async def increment() -> None:
            async with pool.transaction(immediate=True) as conn:
                cursor = await conn.execute("SELECT value FROM counter WHERE id = 1")
                current = (await cursor.fetchone())["value"]
                await asyncio.sleep(0.01)
                await conn.execute(
                    "UPDATE counter SET value = ? WHERE id = 1", (current + 1,)
                )

        await asyncio.gather(*(increment() for _ in range(8)))
        assert await _value(pool) == 8
        await pool.close()


class TestGlobalPool:
    """Tests for the module-level pool helpers."""

    async def test_get_pool_singleton(self, mock_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            pool1 = await get_pool()
            pool2 = await get_pool()
            assert pool1 is pool2
            assert pool1.db_path == mock_settings.storage.db_path
            assert pool1.pool_size == 3

            await close_pool()
            assert conn_module._pool is None

    async def test_close_pool_safe_when_none(self):
        conn_module._pool = None
        await close_pool()

    async def test_get_transaction_and_connection(self, mock_settings, counter_db: Path):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                async with get_transaction(immediate=True) as conn:
                    await conn.execute("UPDATE counter SET value = 3 WHERE id = 1")

                async with get_connection() as conn:
                    cursor = await conn.execute("SELECT value FROM counter")
                    assert (await cursor.fetchone())[0] == 3
            finally:
                await close_pool()
