"""Tests for ExecuteKittingUseCase."""

from unittest.mock import AsyncMock

import pytest

from stockledger.application.use_cases.execute_kitting import ExecuteKittingUseCase
from stockledger.core.entities import (
    KitExecutionStatus,
    KittingComponent,
    KittingOption,
    Material,
    TransactionType,
)
from stockledger.core.exceptions import InvalidQuantityError
from stockledger.core.services.kitting_calculator import compute_kitting_options


@pytest.fixture
def finished_good() -> Material:
    return Material(id="mat-kit", code="KIT-1", name="Starter Kit", unit="un")


@pytest.fixture
def catalog_store(kit_product, kit_bom):
    store = AsyncMock()
    store.list_products.return_value = [kit_product]
    store.list_active_boms.return_value = [kit_bom]
    store.get_product.side_effect = lambda pid: kit_product if pid == "prod-1" else None
    return store


def _option(kit_product, kit_bom, *materials) -> KittingOption:
    return compute_kitting_options([kit_product], materials, [kit_bom])[0]


class TestExecuteKittingUseCase:
    async def test_consumes_and_receives(
        self, ledger_store_factory, resin, pigment, finished_good, kit_product, kit_bom
    ):
        store = ledger_store_factory(resin, pigment, finished_good)
        uc = ExecuteKittingUseCase(ledger_store=store, precision=4)

        result = await uc.execute(_option(kit_product, kit_bom, resin, pigment), 3, actor="ana")

        assert result.status is KitExecutionStatus.CONSUMED_AND_RECEIVED
        assert store.rows["mat-a"].current_stock == 4
        assert store.rows["mat-b"].current_stock == 0
        assert store.rows["mat-kit"].current_stock == 3
        assert result.receipt.transaction_type is TransactionType.IN
        assert result.finished_good_material_id == "mat-kit"

        related = {t.related_entry_id for t in store.transactions}
        assert len(related) == 1
        assert related.pop().startswith("kit-")
        assert store.transactions[0].notes.startswith("Kit assembly Starter Kit (3 un)")

    async def test_missing_finished_good_warns(
        self, ledger_store_factory, resin, pigment, kit_product, kit_bom
    ):
        store = ledger_store_factory(resin, pigment)
        uc = ExecuteKittingUseCase(ledger_store=store, precision=4)

        result = await uc.execute(_option(kit_product, kit_bom, resin, pigment), 3)

        assert result.status is KitExecutionStatus.CONSUMED_NO_RECEIPT
        assert "KIT-1" in result.warning
        assert result.receipt is None
        assert [t.transaction_type for t in store.transactions] == [
            TransactionType.OUT,
            TransactionType.OUT,
        ]
        assert [t.quantity for t in store.transactions] == [6, 9]

    async def test_partial_failure_is_not_rolled_back(
        self, ledger_store_factory, resin, pigment, finished_good, kit_product, kit_bom
    ):
        store = ledger_store_factory(resin, pigment, finished_good)
        uc = ExecuteKittingUseCase(ledger_store=store, precision=4)

        # Resin allows 5 kits, pigment only 3
        result = await uc.execute(_option(kit_product, kit_bom, resin, pigment), 4)

        assert result.status is KitExecutionStatus.PARTIAL
        assert store.rows["mat-a"].current_stock == 2
        assert store.rows["mat-b"].current_stock == 9
        assert store.rows["mat-kit"].current_stock == 0
        assert [c.material_id for c in result.failed_components] == ["mat-b"]
        assert result.failed_components[0].error_code == "INSUFFICIENT_STOCK"
        assert result.receipt is None

    async def test_all_components_fail(
        self, ledger_store_factory, resin, pigment, finished_good, kit_product, kit_bom
    ):
        store = ledger_store_factory(resin, pigment, finished_good)
        uc = ExecuteKittingUseCase(ledger_store=store, precision=4)

        result = await uc.execute(_option(kit_product, kit_bom, resin, pigment), 6)

        assert result.status is KitExecutionStatus.FAILED
        assert store.transactions == []

    async def test_unregistered_component_skipped(
        self, ledger_store_factory, resin, finished_good, kit_product
    ):
        option = KittingOption(
            product=kit_product,
            max_kits=0,
            components=[
                KittingComponent(
                    material_id="mat-a", name="Resin", required_per_unit=1, current_stock=10,
                    possible_kits=10,
                ),
                KittingComponent(
                    material_id=None, name="Unknown", required_per_unit=1, current_stock=0,
                    possible_kits=0,
                ),
            ],
        )
        store = ledger_store_factory(resin, finished_good)
        uc = ExecuteKittingUseCase(ledger_store=store, precision=4)

        result = await uc.execute(option, 2)

        assert result.consumptions[1].skipped is True
        assert result.failed_components == []
        assert result.status is KitExecutionStatus.CONSUMED_AND_RECEIVED
        assert store.rows["mat-a"].current_stock == 8

    async def test_consumption_rounded(self, ledger_store_factory, finished_good, kit_product):
        material = Material(id="mat-f", code="F", name="Fiber", current_stock=1)
        option = KittingOption(
            product=kit_product,
            max_kits=1,
            components=[
                KittingComponent(
                    material_id="mat-f", name="Fiber", required_per_unit=0.1, current_stock=1,
                    possible_kits=10,
                )
            ],
        )
        store = ledger_store_factory(material, finished_good)

        result = await ExecuteKittingUseCase(ledger_store=store, precision=4).execute(option, 3)

        assert result.consumptions[0].quantity == 0.3
        assert store.rows["mat-f"].current_stock == pytest.approx(0.7)

    @pytest.mark.parametrize("qty", [0, -1, 1.5, True, "2"])
    async def test_invalid_quantity(self, ledger_store_factory, kit_product, kit_bom, resin, pigment, qty):
        store = ledger_store_factory(resin, pigment)
        uc = ExecuteKittingUseCase(ledger_store=store, precision=4)

        with pytest.raises(InvalidQuantityError):
            await uc.execute(_option(kit_product, kit_bom, resin, pigment), qty)

        store.apply_transaction.assert_not_called()

    async def test_execute_for_product_recomputes(
        self, ledger_store_factory, catalog_store, resin, pigment, finished_good
    ):
        store = ledger_store_factory(resin, pigment, finished_good)
        uc = ExecuteKittingUseCase(ledger_store=store, catalog_store=catalog_store, precision=4)

        result = await uc.execute_for_product("prod-1", 1)

        assert result.status is KitExecutionStatus.CONSUMED_AND_RECEIVED
        assert store.rows["mat-kit"].current_stock == 1
        catalog_store.list_active_boms.assert_awaited()
