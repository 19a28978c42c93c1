"""Ledger domain entities: movements, transactions and Kardex rows."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    """Types of ledger transactions."""

    IN = "IN"
    OUT = "OUT"
    ADJ = "ADJ"


class StockIn(BaseModel):
    """Receipt. ``purchase_value`` is the total paid, used for the average cost."""

    model_config = ConfigDict(frozen=True)

    quantity: float = Field(..., gt=0)
    purchase_value: float | None = Field(default=None, ge=0)

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.IN

    @property
    def recorded_quantity(self) -> float:
        return self.quantity


class StockOut(BaseModel):
    """Issue or consumption."""

    model_config = ConfigDict(frozen=True)

    quantity: float = Field(..., gt=0)

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.OUT

    @property
    def recorded_quantity(self) -> float:
        return self.quantity


class StockAdjust(BaseModel):
    """Adjustment to an absolute stock level, not a delta."""

    model_config = ConfigDict(frozen=True)

    target_quantity: float = Field(..., ge=0)

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.ADJ

    @property
    def recorded_quantity(self) -> float:
        return self.target_quantity


Movement = StockIn | StockOut | StockAdjust


class PlannedChange(BaseModel):
    """Outcome of applying a movement to a material, before it is persisted."""

    new_stock: float
    new_unit_cost: float | None = None  # None leaves unit_cost untouched
    previous_unit_cost: float


class LedgerTransaction(BaseModel):
    """An immutable ledger row. Corrections are new rows, never edits."""

    id: int | None = None
    material_id: str
    transaction_type: TransactionType
    quantity: float  # delta for IN/OUT, absolute target for ADJ
    notes: str | None = None
    created_by: str | None = None
    related_entry_id: str | None = None
    balance_after: float | None = None
    unit_cost_after: float | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def apply_to(self, stock: float) -> float:
        """Fold this transaction onto a running stock balance."""
        if self.transaction_type is TransactionType.IN:
            return stock + self.quantity
        if self.transaction_type is TransactionType.OUT:
            return stock - self.quantity
        return self.quantity


class KardexEntry(BaseModel):
    """A ledger row with the running balance around it."""

    transaction: LedgerTransaction
    balance_before: float
    balance_after: float


class TransactionPreview(BaseModel):
    """What a movement would do to a material's stock, without writing."""

    current: float
    future: float
    diff: float
