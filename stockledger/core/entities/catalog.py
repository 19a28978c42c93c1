"""Product and bill-of-materials entities, owned by the catalog collaborator."""

from pydantic import BaseModel, Field


class Product(BaseModel):
    """A finished product. ``code`` links it to its finished-good material."""

    id: str
    code: str
    name: str
    unit: str | None = None


class BOMItem(BaseModel):
    """Quantity of one material consumed per unit of the parent product."""

    id: str | None = None
    material_id: str
    quantity: float


class BOMHeader(BaseModel):
    """A versioned recipe header with its ordered items."""

    id: str | None = None
    product_id: str
    version: int = 1
    active: bool = True
    description: str | None = None
    items: list[BOMItem] = Field(default_factory=list)
