"""SQLite implementation of material and ledger storage."""

import uuid
from datetime import UTC, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.ledger import LedgerTransaction, TransactionType
from stockledger.core.entities.material import Material
from stockledger.core.exceptions import (
    DuplicateMaterialCodeError,
    MaterialInUseError,
    MaterialNotFoundError,
    PersistenceError,
)
from stockledger.core.interfaces.ledger_store import ILedgerStore, TransactionPlanner
from stockledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
    get_write_transaction,
)

logger = get_logger(__name__)


def _timestamp(value: datetime) -> str:
    # Fixed width so lexical order in SQL matches chronological order
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _parse_timestamp(value: str | None) -> datetime:
    if value:
        try:
            parsed = datetime.fromisoformat(value)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
        except (ValueError, TypeError):
            pass
    return datetime.now(UTC)


class SQLiteLedgerStore(ILedgerStore):
    """SQLite implementation of material rows and the append-only ledger."""

    async def create_material(self, material: Material) -> Material:
        """Create a new material with its opening balance."""
        now = datetime.now(UTC)
        material.id = material.id or uuid.uuid4().hex
        material.created_at = now
        material.updated_at = now
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO materials (
                        id, code, name, unit, category, group_name,
                        current_stock, opening_stock, allocated, min_stock,
                        unit_cost, lead_time, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        material.id,
                        material.code,
                        material.name,
                        material.unit,
                        material.category,
                        material.group,
                        material.current_stock,
                        material.opening_stock,
                        material.allocated,
                        material.min_stock,
                        material.unit_cost,
                        material.lead_time,
                        _timestamp(material.created_at),
                        _timestamp(material.updated_at),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            if "materials.code" in str(e):
                raise DuplicateMaterialCodeError(material.code) from e
            raise PersistenceError("create_material", str(e)) from e

        logger.info(
            "material_created",
            material_id=material.id,
            code=material.code,
            opening_stock=material.opening_stock,
        )
        return material

    async def get_material(self, material_id: str) -> Material | None:
        """Get material by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_material(row)

    async def get_material_by_code(self, code: str) -> Material | None:
        """Get material by its human code."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE code = ?", (code,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_material(row)

    async def list_materials(self) -> list[Material]:
        """List all materials ordered by name."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials ORDER BY name COLLATE NOCASE, code"
            )
            rows = await cursor.fetchall()
            return [self._row_to_material(row) for row in rows]

    async def delete_material(self, material_id: str) -> bool:
        """Delete a material nothing references."""
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    "DELETE FROM materials WHERE id = ?", (material_id,)
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise MaterialInUseError(material_id) from e

        if deleted:
            logger.info("material_deleted", material_id=material_id)
        return deleted

    async def apply_transaction(
        self,
        material_id: str,
        planner: TransactionPlanner,
    ) -> tuple[Material, LedgerTransaction]:
        """
        Read, plan, update and append under one write lock.

        Domain errors raised by ``planner`` propagate unchanged after the
        rollback; SQLite failures become PersistenceError.
        """
        try:
            async with get_write_transaction() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM materials WHERE id = ?", (material_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise MaterialNotFoundError(material_id)

                material = self._row_to_material(row)
                change, transaction = planner(material)

                material.current_stock = change.new_stock
                if change.new_unit_cost is not None:
                    material.unit_cost = change.new_unit_cost
                material.updated_at = datetime.now(UTC)

                await conn.execute(
                    """
                    UPDATE materials SET
                        current_stock = ?,
                        unit_cost = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        material.current_stock,
                        material.unit_cost,
                        _timestamp(material.updated_at),
                        material_id,
                    ),
                )

                cursor = await conn.execute(
                    """
                    INSERT INTO inventory_transactions (
                        material_id, type, quantity, notes, created_by,
                        related_entry_id, balance_after, unit_cost_after, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        material_id,
                        transaction.transaction_type.value,
                        transaction.quantity,
                        transaction.notes,
                        transaction.created_by,
                        transaction.related_entry_id,
                        transaction.balance_after,
                        transaction.unit_cost_after,
                        _timestamp(transaction.created_at),
                    ),
                )
                transaction.id = cursor.lastrowid
        except aiosqlite.Error as e:
            logger.error(
                "ledger_write_failed",
                material_id=material_id,
                error=str(e),
            )
            raise PersistenceError("apply_transaction", str(e)) from e

        logger.info(
            "inventory_transaction_recorded",
            transaction_id=transaction.id,
            material_id=material_id,
            type=transaction.transaction_type.value,
            qty=transaction.quantity,
        )
        return material, transaction

    async def list_transactions(
        self,
        material_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerTransaction]:
        """List ledger rows newest first, optionally for one material."""
        query = "SELECT * FROM inventory_transactions"
        params: list = []
        if material_id is not None:
            query += " WHERE material_id = ?"
            params.append(material_id)
        query += " ORDER BY created_at DESC, id DESC"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])
        elif offset:
            query += " LIMIT -1 OFFSET ?"
            params.append(offset)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        """Convert a database row to a Material entity."""
        return Material(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            unit=row["unit"],
            category=row["category"],
            group=row["group_name"],
            current_stock=float(row["current_stock"]),
            opening_stock=float(row["opening_stock"]),
            allocated=float(row["allocated"]),
            min_stock=float(row["min_stock"]),
            unit_cost=float(row["unit_cost"]),
            lead_time=int(row["lead_time"]),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> LedgerTransaction:
        """Convert a database row to a LedgerTransaction entity."""
        return LedgerTransaction(
            id=row["id"],
            material_id=row["material_id"],
            transaction_type=TransactionType(row["type"]),
            quantity=float(row["quantity"]),
            notes=row["notes"],
            created_by=row["created_by"],
            related_entry_id=row["related_entry_id"],
            balance_after=row["balance_after"],
            unit_cost_after=row["unit_cost_after"],
            created_at=_parse_timestamp(row["created_at"]),
        )
