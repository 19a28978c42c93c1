"""Fixtures for API tests: the app wired to in-memory stores."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api import dependencies as deps
from stockledger.api.main import app
from stockledger.application.use_cases import (
    ComputeKittingOptionsUseCase,
    CreateMaterialUseCase,
    DeleteMaterialUseCase,
    ExecuteKittingUseCase,
    ReconcileCountsUseCase,
    RecordTransactionUseCase,
    StockOverviewUseCase,
)
from stockledger.core.entities import Material
from stockledger.core.services import StockLedgerService


@pytest.fixture
def finished_good() -> Material:
    return Material(id="mat-kit", code="KIT-1", name="Starter Kit", unit="un")


@pytest.fixture
def store(ledger_store_factory, resin, pigment, finished_good):
    store = ledger_store_factory(resin, pigment, finished_good)

    async def create_material(material):
        material.id = f"mat-{material.code.lower()}"
        store.rows[material.id] = material
        return material

    store.create_material.side_effect = create_material
    store.delete_material.return_value = True
    return store


@pytest.fixture
def catalog(kit_product, kit_bom):
    catalog = AsyncMock()
    catalog.list_products.return_value = [kit_product]
    catalog.list_active_boms.return_value = [kit_bom]
    catalog.get_product.side_effect = lambda pid: kit_product if pid == "prod-1" else None
    return catalog


@pytest.fixture
async def client(store, catalog):
    overrides = {
        deps.get_ledger: lambda: store,
        deps.get_ledger_service: lambda: StockLedgerService(store),
        deps.get_create_material_use_case: lambda: CreateMaterialUseCase(ledger_store=store),
        deps.get_delete_material_use_case: lambda: DeleteMaterialUseCase(ledger_store=store),
        deps.get_stock_overview_use_case: lambda: StockOverviewUseCase(ledger_store=store),
        deps.get_record_transaction_use_case: lambda: RecordTransactionUseCase(ledger_store=store),
        deps.get_reconcile_counts_use_case: lambda: ReconcileCountsUseCase(ledger_store=store),
        deps.get_kitting_options_use_case: lambda: ComputeKittingOptionsUseCase(
            ledger_store=store, catalog_store=catalog
        ),
        deps.get_execute_kitting_use_case: lambda: ExecuteKittingUseCase(
            ledger_store=store, catalog_store=catalog, precision=4
        ),
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)
