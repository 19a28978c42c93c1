"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from stockledger.infrastructure.storage.sqlite import connection as conn_module
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    get_write_transaction,
    open_pool,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False
        assert len(pool._connections) == 0

    def test_custom_values(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=10, busy_timeout=60000)
        assert pool.pool_size == 10
        assert pool.busy_timeout == 60000


class TestConnectionPoolInitialize:
    """Tests for ConnectionPool.initialize()."""

    async def test_initialize_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)

        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        assert pool._pool.qsize() == 2
        await pool.close()


class TestConnectionPragmas:
    async def test_wal_and_foreign_keys(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, busy_timeout=1234)
        conn = await pool._create_connection()
        try:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0].lower() == "wal"
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234
            assert conn.row_factory is aiosqlite.Row
        finally:
            await conn.close()


class TestConnectionPoolAcquire:
    async def test_acquire_returns_connection_to_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)

        async with pool.acquire() as conn:
            assert pool._pool.qsize() == 0
            await conn.execute("SELECT 1")

        assert pool._pool.qsize() == 1
        await pool.close()

    async def test_acquire_initializes_lazily(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire():
            assert pool._initialized is True
        await pool.close()

    async def test_acquire_waits_when_exhausted(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        async with pool.acquire():
            with pytest.raises(asyncio.TimeoutError):
                async with asyncio.timeout(0.05):
                    async with pool.acquire():
                        pass

        await pool.close()


class TestTransactions:
    async def _make_table(self, pool: ConnectionPool) -> None:
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

    async def _count(self, pool: ConnectionPool) -> int:
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            return (await cursor.fetchone())[0]

    async def test_transaction_commits(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await self._make_table(pool)

        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")

        assert await self._count(pool) == 1
        await pool.close()

    async def test_transaction_rolls_back(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await self._make_table(pool)

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        assert await self._count(pool) == 0
        await pool.close()

    async def test_write_transaction_rolls_back(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await self._make_table(pool)

        with pytest.raises(RuntimeError):
            async with pool.write_transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        async with pool.write_transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (2)")

        assert await self._count(pool) == 1
        await pool.close()

    async def test_write_transaction_holds_write_lock(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=0)
        await self._make_table(pool)

        async with pool.write_transaction():
            async with pool.acquire() as other:
                with pytest.raises(aiosqlite.OperationalError):
                    await other.execute("BEGIN IMMEDIATE")

        await pool.close()


class TestGlobalPool:
    async def test_get_pool_singleton(self, mock_settings):
        conn_module._pool = None
        try:
            with patch.object(conn_module, "get_settings", return_value=mock_settings):
                first = await get_pool()
                second = await get_pool()
                assert first is second
                assert first.db_path == mock_settings.storage.db_path
                assert first.pool_size == 2
        finally:
            await close_pool()
        assert conn_module._pool is None

    async def test_helpers(self, mock_settings):
        conn_module._pool = None
        try:
            with patch.object(conn_module, "get_settings", return_value=mock_settings):
                async with get_transaction() as conn:
                    await conn.execute("CREATE TABLE t (v INTEGER)")
                async with get_write_transaction() as conn:
                    await conn.execute("INSERT INTO t VALUES (5)")
                async with get_connection() as conn:
                    cursor = await conn.execute("SELECT v FROM t")
                    assert (await cursor.fetchone())[0] == 5
        finally:
            await close_pool()

    async def test_close_pool_without_pool(self):
        conn_module._pool = None
        await close_pool()
        assert conn_module._pool is None

    async def test_open_pool_switches_database(self, mock_settings, tmp_path: Path):
        conn_module._pool = None
        other_path = tmp_path / "other" / "ledger.db"
        try:
            with patch.object(conn_module, "get_settings", return_value=mock_settings):
                default = await get_pool()
                switched = await open_pool(other_path)

                assert switched is not default
                assert default._initialized is False
                assert await get_pool() is switched
                assert switched.db_path == other_path
                assert switched.pool_size == 2
        finally:
            await close_pool()
        assert other_path.exists()
