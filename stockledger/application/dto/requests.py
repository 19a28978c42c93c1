"""Request DTOs for API endpoints.

Quantity fields accept either JSON numbers or locale-formatted text
("1.234,56"); the use cases run them through the numeric parser.
"""

from pydantic import BaseModel, Field

from stockledger.core.entities.ledger import TransactionType

Quantity = float | str


# --- Materials ---


class CreateMaterialRequest(BaseModel):
    """Request to register a material with its opening balance."""

    code: str = Field(..., min_length=1, max_length=64, description="Unique material code")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    unit: str = Field(default="kg", max_length=16, description="Unit of measure")
    category: str = Field(default="raw_material", description="Material category")
    group: str | None = Field(default=None, description="Group label (blank uses the default)")
    opening_stock: Quantity = Field(default=0, description="Initial stock on hand")
    unit_cost: Quantity = Field(default=0, description="Initial average unit cost")
    min_stock: Quantity = Field(default=0, description="Low-stock threshold")
    allocated: float = Field(default=0, ge=0, description="Reserved quantity")
    lead_time: int = Field(default=0, ge=0, description="Replenishment lead time in days")


# --- Inventory ---


class RecordTransactionRequest(BaseModel):
    """Request to record one ledger movement."""

    material_id: str = Field(..., description="Material ID")
    type: TransactionType = Field(..., description="IN, OUT or ADJ")
    quantity: Quantity = Field(
        ...,
        description="Delta for IN/OUT, absolute target level for ADJ",
    )
    notes: str | None = Field(default=None, max_length=500, description="Free-text notes")
    purchase_value: Quantity | None = Field(
        default=None,
        description="Total paid for an IN; updates the weighted average cost when > 0",
    )
    actor: str | None = Field(default=None, description="Who performed the movement")
    related_entry_id: str | None = Field(
        default=None,
        description="Originating business event (receipt, production entry, kit)",
    )


class PreviewTransactionRequest(BaseModel):
    """Request to preview a movement without writing it."""

    material_id: str = Field(..., description="Material ID")
    type: TransactionType = Field(..., description="IN, OUT or ADJ")
    quantity: Quantity = Field(..., description="Quantity as typed by the user")


class InventoryCountRequest(BaseModel):
    """Physical count results keyed by material ID. Blank counts are ignored."""

    counts: dict[str, Quantity | None] = Field(..., description="Counted quantity per material")
    actor: str | None = Field(default=None, description="Who performed the count")


# --- Kitting ---


class ExecuteKittingRequest(BaseModel):
    """Request to assemble kits of a product from current stock."""

    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., description="Number of kits to assemble")
    actor: str | None = Field(default=None, description="Who triggered the assembly")
