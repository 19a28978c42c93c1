"""
Material domain entity.

Represents a raw material, packaging, labor, energy or overhead line item
whose quantity and average cost are tracked by the stock ledger.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_GROUP = "Diversos"


class MaterialCategory(str, Enum):
    """Built-in material categories. Tenants may use any other string."""

    RAW_MATERIAL = "raw_material"
    PACKAGING = "packaging"
    RETURN = "return"
    ENERGY = "energy"
    LABOR = "labor"
    OVERHEAD = "overhead"


class Material(BaseModel):
    """
    A stock-tracked material.

    ``current_stock`` and ``unit_cost`` are only changed through ledger
    transactions. ``opening_stock`` is the implicit opening balance recorded
    at creation; it is not a ledger row.
    """

    id: str | None = None
    code: str
    name: str
    unit: str = "kg"
    category: str = MaterialCategory.RAW_MATERIAL.value
    group: str = DEFAULT_GROUP
    current_stock: float = 0.0
    opening_stock: float = 0.0
    allocated: float = Field(default=0.0, ge=0)
    min_stock: float = Field(default=0.0, ge=0)
    unit_cost: float = Field(default=0.0, ge=0)
    lead_time: int = Field(default=0, ge=0)  # days, informational
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("group", mode="before")
    @classmethod
    def default_group(cls, v: str | None) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_GROUP
        return str(v).strip()

    @property
    def total_value(self) -> float:
        """Stock valuation at the current average cost."""
        return self.current_stock * self.unit_cost

    @property
    def available(self) -> float:
        """Stock not reserved by open allocations."""
        return self.current_stock - self.allocated

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock
