"""Delete Material Use Case."""

from stockledger.config import get_logger
from stockledger.core.exceptions import MaterialNotFoundError
from stockledger.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


class DeleteMaterialUseCase:
    """Delete a material that has no ledger history and is in no BOM."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, material_id: str) -> None:
        """
        Raises:
            MaterialNotFoundError: no such material.
            MaterialInUseError: ledger rows or BOM items reference it.
        """
        store = await self._get_ledger_store()
        if not await store.delete_material(material_id):
            raise MaterialNotFoundError(material_id)
        logger.info("delete_material_complete", material_id=material_id)
