"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from stockledger.config import reset_settings
from stockledger.core.entities import BOMHeader, BOMItem, Material, Product
from stockledger.core.exceptions import MaterialNotFoundError
from stockledger.infrastructure.storage.sqlite import connection as conn_module
from stockledger.infrastructure.storage.sqlite.migrations import run_migrations


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test's data directory under its own tmp_path."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def resin() -> Material:
    return Material(
        id="mat-a",
        code="A",
        name="Resin",
        current_stock=10.0,
        opening_stock=10.0,
        unit_cost=2.0,
        min_stock=5.0,
    )


@pytest.fixture
def pigment() -> Material:
    return Material(
        id="mat-b",
        code="B",
        name="Pigment",
        unit="un",
        current_stock=9.0,
        opening_stock=9.0,
        unit_cost=1.5,
        min_stock=20.0,
    )


@pytest.fixture
def kit_product() -> Product:
    return Product(id="prod-1", code="KIT-1", name="Starter Kit", unit="un")


@pytest.fixture
def kit_bom() -> BOMHeader:
    return BOMHeader(
        id="bom-1",
        product_id="prod-1",
        items=[
            BOMItem(id="i1", material_id="mat-a", quantity=2),
            BOMItem(id="i2", material_id="mat-b", quantity=3),
        ],
    )


@pytest.fixture
def ledger_store_factory() -> Callable[..., AsyncMock]:
    """
    AsyncMock ledger store backed by a dict.

    ``apply_transaction`` runs the planner against a copy of the stored
    material and only keeps the result when the planner returns.
    """

    def _make(*materials: Material) -> AsyncMock:
        rows = {m.id: m for m in materials}
        transactions = []
        store = AsyncMock()
        store.rows = rows
        store.transactions = transactions

        async def get_material(material_id):
            return rows.get(material_id)

        async def get_material_by_code(code):
            return next((m for m in rows.values() if m.code == code), None)

        async def list_materials():
            return sorted(rows.values(), key=lambda m: m.name)

        async def apply_transaction(material_id, planner):
            if material_id not in rows:
                raise MaterialNotFoundError(material_id)
            working = rows[material_id].model_copy()
            change, transaction = planner(working)
            working.current_stock = change.new_stock
            if change.new_unit_cost is not None:
                working.unit_cost = change.new_unit_cost
            transaction.id = len(transactions) + 1
            rows[material_id] = working
            transactions.append(transaction)
            return working, transaction

        async def list_transactions(material_id=None, limit=None, offset=0):
            found = [t for t in reversed(transactions) if material_id in (None, t.material_id)]
            end = None if limit is None else offset + limit
            return found[offset:end]

        store.get_material.side_effect = get_material
        store.get_material_by_code.side_effect = get_material_by_code
        store.list_materials.side_effect = list_materials
        store.apply_transaction.side_effect = apply_transaction
        store.list_transactions.side_effect = list_transactions
        return store

    return _make


@pytest.fixture
async def migrated_db(tmp_path: Path) -> AsyncGenerator[Path, None]:
    """
    Fully migrated temporary database wired into the global connection pool.

    Stores created during the test read and write this file.
    """
    db_path = tmp_path / "ledger.db"
    await run_migrations(db_path, create_backup_before=False)

    settings = MagicMock()
    settings.storage.db_path = db_path
    settings.storage.pool_size = 2
    settings.storage.busy_timeout = 5000

    conn_module._pool = None
    try:
        with patch.object(conn_module, "get_settings", return_value=settings):
            yield db_path
    finally:
        await conn_module.close_pool()
