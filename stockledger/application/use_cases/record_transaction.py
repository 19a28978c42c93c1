"""Record Transaction Use Case: one IN, OUT or ADJ movement."""

from dataclasses import dataclass

from stockledger.application.dto.requests import RecordTransactionRequest
from stockledger.application.dto.responses import (
    MaterialResponse,
    RecordTransactionResponse,
    TransactionResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities.ledger import LedgerTransaction
from stockledger.core.entities.material import Material
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.stock_ledger import StockLedgerService, build_movement

logger = get_logger(__name__)


@dataclass
class RecordTransactionResult:
    """Result of recording a movement."""

    material: Material
    transaction: LedgerTransaction


class RecordTransactionUseCase:
    """Validate raw input and append a ledger movement."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: RecordTransactionRequest) -> RecordTransactionResult:
        """Execute record transaction use case."""
        # Parse and validate before touching storage
        movement = build_movement(request.type, request.quantity, request.purchase_value)

        service = StockLedgerService(await self._get_ledger_store())
        material, transaction = await service.record_movement(
            request.material_id,
            movement,
            notes=request.notes,
            actor=request.actor,
            related_entry_id=request.related_entry_id,
        )
        return RecordTransactionResult(material=material, transaction=transaction)

    def to_response(self, result: RecordTransactionResult) -> RecordTransactionResponse:
        """Convert result to API response."""
        return RecordTransactionResponse(
            transaction=TransactionResponse.from_entity(result.transaction),
            material=MaterialResponse.from_entity(result.material),
        )
