"""Reconcile Counts Use Case: physical count to ADJ movements."""

from dataclasses import dataclass, field
from typing import Any

from stockledger.application.dto.responses import (
    CountAdjustmentResponse,
    InventoryCountResponse,
    TransactionResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities.ledger import LedgerTransaction, StockAdjust
from stockledger.core.entities.overview import CountAdjustment
from stockledger.core.exceptions import MaterialNotFoundError
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.numeric_parser import require_quantity
from stockledger.core.services.stock_ledger import StockLedgerService

logger = get_logger(__name__)

COUNT_NOTE = "Inventory count"


@dataclass
class ReconcileCountsResult:
    """Divergences found and the ADJ rows written for them."""

    adjustments: list[CountAdjustment] = field(default_factory=list)
    transactions: list[LedgerTransaction] = field(default_factory=list)


class ReconcileCountsUseCase:
    """Turn counted quantities into one ADJ per divergent material."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(
        self,
        counts: dict[str, Any],
        actor: str | None = None,
    ) -> ReconcileCountsResult:
        """
        Validate every count first, then write adjustments.

        Blank entries are ignored. A bad count or unknown material fails the
        whole request before any write.
        """
        parsed: dict[str, float] = {}
        for material_id, raw in counts.items():
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            parsed[material_id] = require_quantity(
                raw, field=f"counts.{material_id}", positive=False
            )

        store = await self._get_ledger_store()
        result = ReconcileCountsResult()
        for material_id, counted in parsed.items():
            material = await store.get_material(material_id)
            if material is None:
                raise MaterialNotFoundError(material_id)
            if counted != material.current_stock:
                result.adjustments.append(
                    CountAdjustment(
                        material_id=material_id,
                        expected=material.current_stock,
                        counted=counted,
                    )
                )

        service = StockLedgerService(store)
        for adjustment in result.adjustments:
            _, transaction = await service.record_movement(
                adjustment.material_id,
                StockAdjust(target_quantity=adjustment.counted),
                notes=COUNT_NOTE,
                actor=actor,
            )
            result.transactions.append(transaction)

        logger.info(
            "inventory_count_reconciled",
            counted=len(parsed),
            adjusted=len(result.adjustments),
        )
        return result

    def to_response(self, result: ReconcileCountsResult) -> InventoryCountResponse:
        """Convert result to API response."""
        return InventoryCountResponse(
            adjustments=[
                CountAdjustmentResponse(
                    material_id=a.material_id,
                    expected=a.expected,
                    counted=a.counted,
                    divergence=a.divergence,
                )
                for a in result.adjustments
            ],
            transactions=[TransactionResponse.from_entity(t) for t in result.transactions],
        )
