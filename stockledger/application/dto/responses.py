"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.kitting import (
    ComponentConsumption,
    KitExecutionResult,
    KittingComponent,
    KittingOption,
)
from stockledger.core.entities.ledger import KardexEntry, LedgerTransaction
from stockledger.core.entities.material import Material


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str | None = None
    database_latency_ms: float | None = None


# --- Materials ---


class MaterialResponse(BaseModel):
    """Material response DTO."""

    id: str
    code: str
    name: str
    unit: str
    category: str
    group: str
    current_stock: float
    opening_stock: float
    allocated: float
    available: float
    min_stock: float
    unit_cost: float
    total_value: float
    is_low_stock: bool
    lead_time: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, material: Material) -> "MaterialResponse":
        return cls(
            id=material.id,  # type: ignore[arg-type]
            code=material.code,
            name=material.name,
            unit=material.unit,
            category=material.category,
            group=material.group,
            current_stock=material.current_stock,
            opening_stock=material.opening_stock,
            allocated=material.allocated,
            available=material.available,
            min_stock=material.min_stock,
            unit_cost=material.unit_cost,
            total_value=material.total_value,
            is_low_stock=material.is_low_stock,
            lead_time=material.lead_time,
            created_at=material.created_at,
            updated_at=material.updated_at,
        )


class MaterialListResponse(BaseModel):
    """List of materials."""

    materials: list[MaterialResponse]
    total: int


class MaterialGroupResponse(BaseModel):
    """Group summary with its materials."""

    name: str
    total_stock: float
    total_value: float
    low_stock_count: int
    units: list[str]
    items: list[MaterialResponse]


class InventoryMetricsResponse(BaseModel):
    """Headline inventory figures."""

    total_value: float
    low_stock_count: int
    total_items: int


class InventoryOverviewResponse(BaseModel):
    """Grouped stock view with headline metrics."""

    metrics: InventoryMetricsResponse
    groups: list[MaterialGroupResponse]


# --- Inventory ---


class TransactionResponse(BaseModel):
    """Ledger transaction response DTO."""

    id: int
    material_id: str
    type: str
    quantity: float
    notes: str | None = None
    created_by: str | None = None
    related_entry_id: str | None = None
    balance_after: float | None = None
    unit_cost_after: float | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, trx: LedgerTransaction) -> "TransactionResponse":
        return cls(
            id=trx.id,  # type: ignore[arg-type]
            material_id=trx.material_id,
            type=trx.transaction_type.value,
            quantity=trx.quantity,
            notes=trx.notes,
            created_by=trx.created_by,
            related_entry_id=trx.related_entry_id,
            balance_after=trx.balance_after,
            unit_cost_after=trx.unit_cost_after,
            created_at=trx.created_at,
        )


class TransactionListResponse(BaseModel):
    """Ledger page, newest first."""

    transactions: list[TransactionResponse]
    total: int
    limit: int | None = None
    offset: int = 0


class RecordTransactionResponse(BaseModel):
    """Response for a recorded movement."""

    transaction: TransactionResponse
    material: MaterialResponse


class TransactionPreviewResponse(BaseModel):
    """Stock before and after a hypothetical movement."""

    material_id: str
    type: str
    current: float
    future: float
    diff: float


class KardexEntryResponse(BaseModel):
    """One Kardex line."""

    transaction: TransactionResponse
    balance_before: float
    balance_after: float

    @classmethod
    def from_entity(cls, entry: KardexEntry) -> "KardexEntryResponse":
        return cls(
            transaction=TransactionResponse.from_entity(entry.transaction),
            balance_before=entry.balance_before,
            balance_after=entry.balance_after,
        )


class KardexResponse(BaseModel):
    """Chronological movement history of one material."""

    material: MaterialResponse
    opening_stock: float
    entries: list[KardexEntryResponse]
    consistent: bool = Field(
        ..., description="Whether the ledger replays to the stored stock"
    )


class CountAdjustmentResponse(BaseModel):
    """Divergence found for one material."""

    material_id: str
    expected: float
    counted: float
    divergence: float


class InventoryCountResponse(BaseModel):
    """Result of a physical count reconciliation."""

    adjustments: list[CountAdjustmentResponse]
    transactions: list[TransactionResponse]


# --- Kitting ---


class KittingComponentResponse(BaseModel):
    """Constraint breakdown of one BOM line."""

    material_id: str | None
    name: str
    required_per_unit: float
    current_stock: float
    possible_kits: int | None
    is_bottleneck: bool = False

    @classmethod
    def from_entity(
        cls, component: KittingComponent, is_bottleneck: bool = False
    ) -> "KittingComponentResponse":
        return cls(
            material_id=component.material_id,
            name=component.name,
            required_per_unit=component.required_per_unit,
            current_stock=component.current_stock,
            possible_kits=component.possible_kits,
            is_bottleneck=is_bottleneck,
        )


class KittingOptionResponse(BaseModel):
    """Feasibility of one product."""

    product_id: str
    product_code: str
    product_name: str
    max_kits: int
    components: list[KittingComponentResponse]

    @classmethod
    def from_entity(cls, option: KittingOption) -> "KittingOptionResponse":
        bottlenecks = option.bottlenecks
        return cls(
            product_id=option.product.id,
            product_code=option.product.code,
            product_name=option.product.name,
            max_kits=option.max_kits,
            components=[
                KittingComponentResponse.from_entity(c, c in bottlenecks)
                for c in option.components
            ],
        )


class KittingOptionsResponse(BaseModel):
    """Feasibility of every product with a recipe."""

    options: list[KittingOptionResponse]
    total: int


class ComponentConsumptionResponse(BaseModel):
    """Outcome of one component OUT."""

    material_id: str | None
    name: str
    quantity: float
    succeeded: bool
    skipped: bool
    transaction_id: int | None = None
    error_code: str | None = None
    error: str | None = None

    @classmethod
    def from_entity(cls, c: ComponentConsumption) -> "ComponentConsumptionResponse":
        return cls(
            material_id=c.material_id,
            name=c.name,
            quantity=c.quantity,
            succeeded=c.succeeded,
            skipped=c.skipped,
            transaction_id=c.transaction.id if c.transaction else None,
            error_code=c.error_code,
            error=c.error,
        )


class KitExecutionResponse(BaseModel):
    """Step-by-step kit execution report."""

    product_id: str
    product_code: str
    requested_qty: int
    status: str
    consumptions: list[ComponentConsumptionResponse]
    receipt: TransactionResponse | None = None
    finished_good_material_id: str | None = None
    warning: str | None = None
    receipt_error: str | None = None

    @classmethod
    def from_entity(cls, result: KitExecutionResult) -> "KitExecutionResponse":
        return cls(
            product_id=result.product.id,
            product_code=result.product.code,
            requested_qty=result.requested_qty,
            status=result.status.value,
            consumptions=[
                ComponentConsumptionResponse.from_entity(c) for c in result.consumptions
            ],
            receipt=TransactionResponse.from_entity(result.receipt) if result.receipt else None,
            finished_good_material_id=result.finished_good_material_id,
            warning=result.warning,
            receipt_error=result.receipt_error,
        )
