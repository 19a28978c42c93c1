"""Read-only stock projections recomputed from the material collection."""

from pydantic import BaseModel, Field

from stockledger.core.entities.material import Material


class MaterialGroup(BaseModel):
    """Materials sharing a group label, with aggregated figures."""

    name: str
    items: list[Material] = Field(default_factory=list)
    total_stock: float = 0.0
    total_value: float = 0.0
    low_stock_count: int = 0
    units: list[str] = Field(default_factory=list)


class InventoryMetrics(BaseModel):
    """Headline figures across all materials."""

    total_value: float = 0.0
    low_stock_count: int = 0
    total_items: int = 0


class CountAdjustment(BaseModel):
    """Divergence found by a physical count."""

    material_id: str
    expected: float
    counted: float

    @property
    def divergence(self) -> float:
        return self.counted - self.expected
