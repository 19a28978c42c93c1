"""
Execute Kitting Use Case.

Consumes each component with an OUT movement, then receives the finished good
with one IN. Movements are independent single-material writes: a failure part
way through is reported, never compensated.
"""

import uuid

from stockledger.application.use_cases.compute_kitting_options import (
    ComputeKittingOptionsUseCase,
)
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.kitting import (
    ComponentConsumption,
    KitExecutionResult,
    KitExecutionStatus,
    KittingComponent,
    KittingOption,
)
from stockledger.core.entities.ledger import StockIn, StockOut
from stockledger.core.exceptions import InvalidQuantityError, StockLedgerError
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.stock_ledger import StockLedgerService

logger = get_logger(__name__)


class ExecuteKittingUseCase:
    """Assemble kits of one product from component stock."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        catalog_store: ICatalogStore | None = None,
        precision: int | None = None,
    ):
        self._ledger_store = ledger_store
        self._catalog_store = catalog_store
        self._precision = precision

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    @property
    def precision(self) -> int:
        if self._precision is None:
            self._precision = get_settings().ledger.kit_consumption_precision
        return self._precision

    @staticmethod
    def _validate_quantity(requested_qty: int) -> int:
        if (
            isinstance(requested_qty, bool)
            or not isinstance(requested_qty, int)
            or requested_qty <= 0
        ):
            raise InvalidQuantityError(
                "quantity", requested_qty, "must be a whole number greater than zero"
            )
        return requested_qty

    async def execute_for_product(
        self,
        product_id: str,
        requested_qty: int,
        actor: str | None = None,
    ) -> KitExecutionResult:
        """Recompute the product's option against current stock, then execute it."""
        qty = self._validate_quantity(requested_qty)
        options = ComputeKittingOptionsUseCase(
            ledger_store=await self._get_ledger_store(),
            catalog_store=self._catalog_store,
        )
        option = await options.for_product(product_id)
        return await self.execute(option, qty, actor=actor)

    async def execute(
        self,
        option: KittingOption,
        requested_qty: int,
        actor: str | None = None,
    ) -> KitExecutionResult:
        """
        Execute a kit assembly.

        Raises:
            InvalidQuantityError: ``requested_qty`` is not a positive integer.

        Everything else is reported in the result's status.
        """
        qty = self._validate_quantity(requested_qty)
        product = option.product
        ledger = StockLedgerService(await self._get_ledger_store())
        # Correlates every row written by this execution
        related_entry_id = f"kit-{uuid.uuid4().hex[:12]}"
        notes = f"Kit assembly {product.name} ({qty} un)"

        logger.info(
            "kit_execution_started",
            product_id=product.id,
            requested_qty=qty,
            max_kits=option.max_kits,
            related_entry_id=related_entry_id,
        )

        consumptions = [
            await self._consume(ledger, component, qty, notes, actor, related_entry_id)
            for component in option.components
        ]
        result = KitExecutionResult(
            product=product,
            requested_qty=qty,
            status=KitExecutionStatus.FAILED,
            consumptions=consumptions,
        )

        if result.failed_components:
            consumed = any(c.succeeded for c in consumptions)
            result.status = KitExecutionStatus.PARTIAL if consumed else KitExecutionStatus.FAILED
            logger.warning(
                "kit_execution_incomplete",
                product_id=product.id,
                status=result.status.value,
                failed=[c.material_id for c in result.failed_components],
            )
            return result

        await self._receive(ledger, result, notes, actor, related_entry_id)

        logger.info(
            "kit_execution_complete",
            product_id=product.id,
            requested_qty=qty,
            status=result.status.value,
        )
        return result

    async def _consume(
        self,
        ledger: StockLedgerService,
        component: KittingComponent,
        qty: int,
        notes: str,
        actor: str | None,
        related_entry_id: str,
    ) -> ComponentConsumption:
        amount = round(component.required_per_unit * qty, self.precision)
        consumption = ComponentConsumption(
            material_id=component.material_id,
            name=component.name,
            quantity=amount,
        )

        if component.material_id is None:
            consumption.skipped = True
            consumption.error = "Component material is not registered"
            return consumption
        if amount <= 0:
            consumption.skipped = True
            return consumption

        try:
            _, transaction = await ledger.record_movement(
                component.material_id,
                StockOut(quantity=amount),
                notes=notes,
                actor=actor,
                related_entry_id=related_entry_id,
            )
            consumption.transaction = transaction
        except StockLedgerError as e:
            logger.warning(
                "kit_component_failed",
                material_id=component.material_id,
                quantity=amount,
                error_code=e.code,
            )
            consumption.error_code = e.code
            consumption.error = e.message
        return consumption

    async def _receive(
        self,
        ledger: StockLedgerService,
        result: KitExecutionResult,
        notes: str,
        actor: str | None,
        related_entry_id: str,
    ) -> None:
        product = result.product
        store = await self._get_ledger_store()
        finished_good = await store.get_material_by_code(product.code)
        if finished_good is None:
            result.status = KitExecutionStatus.CONSUMED_NO_RECEIPT
            result.warning = (
                f"No material with code '{product.code}' is registered; "
                "components were consumed but no finished stock was received"
            )
            logger.warning(
                "kit_finished_good_missing",
                product_id=product.id,
                product_code=product.code,
            )
            return

        result.finished_good_material_id = finished_good.id
        try:
            _, receipt = await ledger.record_movement(
                finished_good.id,  # type: ignore[arg-type]
                StockIn(quantity=float(result.requested_qty)),
                notes=notes,
                actor=actor,
                related_entry_id=related_entry_id,
            )
        except StockLedgerError as e:
            result.status = KitExecutionStatus.CONSUMED
            result.receipt_error = e.message
            logger.error(
                "kit_receipt_failed",
                product_id=product.id,
                material_id=finished_good.id,
                error_code=e.code,
            )
            return

        result.receipt = receipt
        result.status = KitExecutionStatus.CONSUMED_AND_RECEIVED
