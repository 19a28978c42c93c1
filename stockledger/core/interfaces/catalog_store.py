"""Abstract interface for the read-only product/BOM catalog."""

from abc import ABC, abstractmethod

from stockledger.core.entities.catalog import BOMHeader, Product


class ICatalogStore(ABC):
    """Products and their active BOMs, consumed read-only."""

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """List all products."""
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def list_active_boms(self) -> list[BOMHeader]:
        """List active BOM headers with their items, newest version first."""
        pass
