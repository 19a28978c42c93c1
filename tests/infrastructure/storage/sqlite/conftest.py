"""Pytest fixtures for SQLite storage tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from stockledger.core.entities import Material
from stockledger.infrastructure.storage.sqlite import SQLiteCatalogStore, SQLiteLedgerStore
from stockledger.infrastructure.storage.sqlite.connection import get_transaction


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
def ledger_store(migrated_db) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
def catalog_store(migrated_db) -> SQLiteCatalogStore:
    return SQLiteCatalogStore()


@pytest.fixture
async def stored_resin(ledger_store: SQLiteLedgerStore) -> Material:
    return await ledger_store.create_material(
        Material(code="A", name="Resin", current_stock=10, opening_stock=10, unit_cost=2.0)
    )


@pytest.fixture
async def seed_catalog(migrated_db):
    """Insert catalog rows the way the catalog owner would."""

    async def _seed(products=(), headers=(), items=()):
        async with get_transaction() as conn:
            await conn.executemany(
                "INSERT INTO products (id, code, name, unit) VALUES (?, ?, ?, ?)", products
            )
            await conn.executemany(
                "INSERT INTO bom_headers (id, product_id, version, active) VALUES (?, ?, ?, ?)",
                headers,
            )
            await conn.executemany(
                "INSERT INTO bom_items (id, bom_id, material_id, quantity, position) "
                "VALUES (?, ?, ?, ?, ?)",
                items,
            )

    return _seed
