"""SQLite implementation of the read-only product/BOM catalog."""

import aiosqlite

from stockledger.core.entities.catalog import BOMHeader, BOMItem, Product
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection


class SQLiteCatalogStore(ICatalogStore):
    """Reads products and active BOMs maintained by the catalog owner."""

    async def list_products(self) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products ORDER BY name COLLATE NOCASE, code"
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def get_product(self, product_id: str) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_product(row)

    async def list_active_boms(self) -> list[BOMHeader]:
        """Active headers, newest version first within each product."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM bom_headers
                WHERE active = 1
                ORDER BY product_id, version DESC
                """
            )
            header_rows = await cursor.fetchall()

            cursor = await conn.execute(
                """
                SELECT i.* FROM bom_items i
                JOIN bom_headers h ON h.id = i.bom_id
                WHERE h.active = 1
                ORDER BY i.bom_id, i.position, i.id
                """
            )
            item_rows = await cursor.fetchall()

        items_by_bom: dict[str, list[BOMItem]] = {}
        for row in item_rows:
            items_by_bom.setdefault(row["bom_id"], []).append(
                BOMItem(
                    id=row["id"],
                    material_id=row["material_id"],
                    quantity=float(row["quantity"]),
                )
            )

        return [
            BOMHeader(
                id=row["id"],
                product_id=row["product_id"],
                version=row["version"],
                active=bool(row["active"]),
                description=row["description"],
                items=items_by_bom.get(row["id"], []),
            )
            for row in header_rows
        ]

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            unit=row["unit"],
        )
