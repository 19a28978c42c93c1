"""Tests for ComputeKittingOptionsUseCase."""

from unittest.mock import AsyncMock

import pytest

from stockledger.application.use_cases.compute_kitting_options import (
    ComputeKittingOptionsUseCase,
)
from stockledger.core.entities import Product
from stockledger.core.exceptions import BOMNotFoundError, ProductNotFoundError


@pytest.fixture
def catalog_store(kit_product, kit_bom):
    store = AsyncMock()
    orphan = Product(id="prod-2", code="LOOSE", name="No recipe")
    store.list_products.return_value = [kit_product, orphan]
    store.list_active_boms.return_value = [kit_bom]
    store.get_product.side_effect = lambda pid: {
        "prod-1": kit_product,
        "prod-2": orphan,
    }.get(pid)
    return store


class TestComputeKittingOptionsUseCase:
    async def test_execute(self, ledger_store_factory, catalog_store, resin, pigment):
        uc = ComputeKittingOptionsUseCase(
            ledger_store=ledger_store_factory(resin, pigment),
            catalog_store=catalog_store,
        )

        options = await uc.execute()

        assert len(options) == 1
        assert options[0].max_kits == 3
        assert options[0].bottlenecks[0].material_id == "mat-b"

    async def test_unknown_material_named_from_settings(self, ledger_store_factory, catalog_store, resin):
        uc = ComputeKittingOptionsUseCase(
            ledger_store=ledger_store_factory(resin),
            catalog_store=catalog_store,
        )

        option = (await uc.execute())[0]

        assert option.components[1].name == "Unknown"
        assert option.max_kits == 0

    async def test_for_product(self, ledger_store_factory, catalog_store, resin, pigment):
        uc = ComputeKittingOptionsUseCase(
            ledger_store=ledger_store_factory(resin, pigment),
            catalog_store=catalog_store,
        )
        option = await uc.for_product("prod-1")
        assert option.product.code == "KIT-1"

    async def test_for_unknown_product(self, ledger_store_factory, catalog_store):
        uc = ComputeKittingOptionsUseCase(
            ledger_store=ledger_store_factory(), catalog_store=catalog_store
        )
        with pytest.raises(ProductNotFoundError):
            await uc.for_product("ghost")

    async def test_for_product_without_bom(self, ledger_store_factory, catalog_store):
        uc = ComputeKittingOptionsUseCase(
            ledger_store=ledger_store_factory(), catalog_store=catalog_store
        )
        with pytest.raises(BOMNotFoundError):
            await uc.for_product("prod-2")
