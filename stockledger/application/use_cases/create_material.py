"""Create Material Use Case: register a material with its opening balance."""

from stockledger.application.dto.requests import CreateMaterialRequest
from stockledger.config import get_settings
from stockledger.core.entities.material import Material
from stockledger.core.exceptions import ValidationError
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.numeric_parser import require_quantity


class CreateMaterialUseCase:
    """Create a material. Opening stock is the implicit opening transaction."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: CreateMaterialRequest) -> Material:
        """Execute create material use case."""
        code = request.code.strip()
        name = request.name.strip()
        if not code:
            raise ValidationError("code", "must not be blank", request.code)
        if not name:
            raise ValidationError("name", "must not be blank", request.name)

        opening_stock = require_quantity(request.opening_stock, field="opening_stock", positive=False)
        unit_cost = require_quantity(request.unit_cost, field="unit_cost", positive=False)
        min_stock = require_quantity(request.min_stock, field="min_stock", positive=False)

        group = request.group
        if group is None or not group.strip():
            group = get_settings().ledger.default_group

        material = Material(
            code=code,
            name=name,
            unit=request.unit,
            category=request.category,
            group=group,
            current_stock=opening_stock,
            opening_stock=opening_stock,
            allocated=request.allocated,
            min_stock=min_stock,
            unit_cost=unit_cost,
            lead_time=request.lead_time,
        )

        store = await self._get_ledger_store()
        return await store.create_material(material)
