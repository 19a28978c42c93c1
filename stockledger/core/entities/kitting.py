"""Kitting entities: feasibility options and execution results."""

from enum import Enum

from pydantic import BaseModel, Field

from stockledger.core.entities.catalog import Product
from stockledger.core.entities.ledger import LedgerTransaction


class KittingComponent(BaseModel):
    """Per-component constraint breakdown."""

    material_id: str | None = None  # None when the BOM line points nowhere
    name: str
    required_per_unit: float
    current_stock: float
    possible_kits: int | None = None  # None: the line imposes no constraint

    @property
    def is_constraining(self) -> bool:
        return self.possible_kits is not None


class KittingOption(BaseModel):
    """How many kits of a product current stock allows, and why."""

    product: Product
    max_kits: int = Field(..., ge=0)
    components: list[KittingComponent]

    @property
    def bottlenecks(self) -> list[KittingComponent]:
        """Components whose stock binds ``max_kits``."""
        return [
            c for c in self.components
            if c.is_constraining and c.possible_kits == self.max_kits
        ]


class KitExecutionStatus(str, Enum):
    """Aggregate outcome of a kit execution."""

    CONSUMED_AND_RECEIVED = "consumed_and_received"
    CONSUMED_NO_RECEIPT = "consumed_no_receipt"
    CONSUMED = "consumed"
    PARTIAL = "partial"
    FAILED = "failed"


class ComponentConsumption(BaseModel):
    """Result of the OUT movement for one component."""

    material_id: str | None
    name: str
    quantity: float
    transaction: LedgerTransaction | None = None
    skipped: bool = False
    error_code: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.transaction is not None


class KitExecutionResult(BaseModel):
    """Step-by-step report of a kit execution. Nothing is rolled back."""

    product: Product
    requested_qty: int
    status: KitExecutionStatus
    consumptions: list[ComponentConsumption] = Field(default_factory=list)
    receipt: LedgerTransaction | None = None
    finished_good_material_id: str | None = None
    warning: str | None = None
    receipt_error: str | None = None

    @property
    def failed_components(self) -> list[ComponentConsumption]:
        return [c for c in self.consumptions if not c.skipped and not c.succeeded]
