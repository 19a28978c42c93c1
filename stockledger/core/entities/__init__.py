"""Domain entities."""

from stockledger.core.entities.catalog import BOMHeader, BOMItem, Product
from stockledger.core.entities.kitting import (
    ComponentConsumption,
    KitExecutionResult,
    KitExecutionStatus,
    KittingComponent,
    KittingOption,
)
from stockledger.core.entities.ledger import (
    KardexEntry,
    LedgerTransaction,
    Movement,
    PlannedChange,
    StockAdjust,
    StockIn,
    StockOut,
    TransactionPreview,
    TransactionType,
)
from stockledger.core.entities.material import DEFAULT_GROUP, Material, MaterialCategory
from stockledger.core.entities.overview import CountAdjustment, InventoryMetrics, MaterialGroup

__all__ = [
    # Catalog
    "Product",
    "BOMHeader",
    "BOMItem",
    # Material
    "Material",
    "MaterialCategory",
    "DEFAULT_GROUP",
    # Ledger
    "TransactionType",
    "StockIn",
    "StockOut",
    "StockAdjust",
    "Movement",
    "PlannedChange",
    "LedgerTransaction",
    "KardexEntry",
    "TransactionPreview",
    # Kitting
    "KittingComponent",
    "KittingOption",
    "KitExecutionStatus",
    "ComponentConsumption",
    "KitExecutionResult",
    # Overview
    "MaterialGroup",
    "InventoryMetrics",
    "CountAdjustment",
]
