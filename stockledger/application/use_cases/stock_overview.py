"""Stock Overview Use Case: grouped stock, headline metrics, low stock."""

from dataclasses import dataclass

from stockledger.application.dto.responses import (
    InventoryMetricsResponse,
    InventoryOverviewResponse,
    MaterialGroupResponse,
    MaterialResponse,
)
from stockledger.core.entities.material import Material
from stockledger.core.entities.overview import InventoryMetrics, MaterialGroup
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.stock_overview import group_materials, inventory_metrics, low_stock


@dataclass
class StockOverviewResult:
    groups: list[MaterialGroup]
    metrics: InventoryMetrics


class StockOverviewUseCase:
    """Projections recomputed from the material rows on every call."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(
        self,
        search: str | None = None,
        category: str | None = None,
    ) -> StockOverviewResult:
        """Groups honour the filters; metrics always cover every material."""
        store = await self._get_ledger_store()
        materials = await store.list_materials()
        return StockOverviewResult(
            groups=group_materials(materials, search=search, category=category),
            metrics=inventory_metrics(materials),
        )

    async def low_stock(self) -> list[Material]:
        store = await self._get_ledger_store()
        return low_stock(await store.list_materials())

    def to_response(self, result: StockOverviewResult) -> InventoryOverviewResponse:
        """Convert result to API response."""
        return InventoryOverviewResponse(
            metrics=InventoryMetricsResponse(
                total_value=result.metrics.total_value,
                low_stock_count=result.metrics.low_stock_count,
                total_items=result.metrics.total_items,
            ),
            groups=[
                MaterialGroupResponse(
                    name=g.name,
                    total_stock=g.total_stock,
                    total_value=g.total_value,
                    low_stock_count=g.low_stock_count,
                    units=g.units,
                    items=[MaterialResponse.from_entity(m) for m in g.items],
                )
                for g in result.groups
            ],
        )
