"""
Stock ledger service.

Turns a movement into a stock (and possibly average cost) change and hands it
to the store, which commits the material update and the ledger row together.

Movement semantics:

- IN adds its quantity. When a purchase value is declared the weighted
  average cost becomes ``(stock * cost + purchase_value) / new_stock``.
- OUT subtracts its quantity and is refused if stock would go negative.
- ADJ sets stock to its quantity (an absolute level, not a delta).

OUT and ADJ never touch the unit cost.
"""

import math
from typing import Any

from stockledger.config import get_logger
from stockledger.core.entities.ledger import (
    KardexEntry,
    LedgerTransaction,
    Movement,
    PlannedChange,
    StockAdjust,
    StockIn,
    StockOut,
    TransactionPreview,
    TransactionType,
)
from stockledger.core.entities.material import Material
from stockledger.core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    MaterialNotFoundError,
    ValidationError,
)
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.numeric_parser import parse_quantity, require_quantity

logger = get_logger(__name__)


def _transaction_type(value: TransactionType | str) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(
            "transaction_type", "must be one of IN, OUT, ADJ", value
        ) from None


def build_movement(
    transaction_type: TransactionType | str,
    quantity: Any,
    purchase_value: Any = None,
) -> Movement:
    """
    Validate raw input and build the matching movement variant.

    Raises:
        ValidationError: unknown transaction type.
        InvalidQuantityError: unparseable quantity, non-positive IN/OUT
            quantity, negative ADJ target, or a bad purchase value.
    """
    transaction_type = _transaction_type(transaction_type)

    if transaction_type is TransactionType.ADJ:
        return StockAdjust(target_quantity=require_quantity(quantity, positive=False))

    qty = require_quantity(quantity)
    if transaction_type is TransactionType.OUT:
        return StockOut(quantity=qty)

    value = None
    if purchase_value is not None and str(purchase_value).strip() != "":
        value = require_quantity(purchase_value, field="purchase_value", positive=False)
    return StockIn(quantity=qty, purchase_value=value)


def plan_movement(material: Material, movement: Movement) -> PlannedChange:
    """
    Compute the new stock and unit cost for ``movement`` against ``material``.

    Pure; raises InsufficientStockError before anything is written.
    """
    current = material.current_stock
    previous_cost = material.unit_cost

    if isinstance(movement, StockIn):
        new_stock = current + movement.quantity
        new_cost = None
        # A zero purchase value leaves the average untouched
        if movement.purchase_value and new_stock > 0:
            new_cost = (current * previous_cost + movement.purchase_value) / new_stock
        return PlannedChange(
            new_stock=new_stock,
            new_unit_cost=new_cost,
            previous_unit_cost=previous_cost,
        )

    if isinstance(movement, StockOut):
        new_stock = current - movement.quantity
        if new_stock < 0:
            raise InsufficientStockError(
                material_id=material.id or material.code,
                requested=movement.quantity,
                available=current,
            )
        return PlannedChange(new_stock=new_stock, previous_unit_cost=previous_cost)

    if isinstance(movement, StockAdjust):
        return PlannedChange(
            new_stock=movement.target_quantity,
            previous_unit_cost=previous_cost,
        )

    raise TypeError(f"Unsupported movement: {type(movement).__name__}")


def compose_notes(
    notes: str | None,
    actor: str | None,
    change: PlannedChange | None = None,
) -> str | None:
    """Append actor identity and the average-cost audit trail to free-text notes."""
    text = (notes or "").strip()
    if actor:
        text = f"{text} - by {actor}" if text else f"Manual - by {actor}"
    if change is not None and change.new_unit_cost is not None:
        text += (
            f" | Avg cost adjusted: {change.previous_unit_cost:.2f}"
            f" -> {change.new_unit_cost:.2f}"
        )
    return text or None


def replay_stock(opening_stock: float, transactions: list[LedgerTransaction]) -> float:
    """Fold ledger rows in creation order starting from the opening balance."""
    stock = opening_stock
    for trx in sorted(transactions, key=lambda t: (t.created_at, t.id or 0)):
        stock = trx.apply_to(stock)
    return stock


def build_kardex(material: Material, transactions: list[LedgerTransaction]) -> list[KardexEntry]:
    """Running balances, oldest first."""
    entries: list[KardexEntry] = []
    balance = material.opening_stock
    for trx in sorted(transactions, key=lambda t: (t.created_at, t.id or 0)):
        after = trx.apply_to(balance)
        entries.append(KardexEntry(transaction=trx, balance_before=balance, balance_after=after))
        balance = after
    return entries


def preview_movement(
    material: Material,
    transaction_type: TransactionType | str,
    quantity: Any,
) -> TransactionPreview | None:
    """What the movement would leave in stock; None if quantity is unparseable."""
    transaction_type = _transaction_type(transaction_type)
    qty = parse_quantity(quantity)
    if math.isnan(qty):
        return None
    current = material.current_stock
    pending = LedgerTransaction(
        material_id=material.id or "",
        transaction_type=transaction_type,
        quantity=qty,
    )
    future = pending.apply_to(current)
    return TransactionPreview(current=current, future=future, diff=future - current)


class StockLedgerService:
    """
    Records ledger transactions and serves ledger read models.

    Pure service: the ledger store is injected via constructor and owns the
    atomic write.
    """

    def __init__(self, store: ILedgerStore) -> None:
        self._store = store

    async def record_transaction(
        self,
        material_id: str,
        transaction_type: TransactionType | str,
        quantity: Any,
        notes: str | None = None,
        purchase_value: Any = None,
        actor: str | None = None,
        related_entry_id: str | None = None,
    ) -> LedgerTransaction:
        """
        Parse, validate and record one movement.

        Raises:
            InvalidQuantityError: before any write.
            MaterialNotFoundError: unknown material.
            InsufficientStockError: OUT would go negative; nothing written.
            PersistenceError: the atomic write did not commit.
        """
        movement = build_movement(transaction_type, quantity, purchase_value)
        _, transaction = await self.record_movement(
            material_id,
            movement,
            notes=notes,
            actor=actor,
            related_entry_id=related_entry_id,
        )
        return transaction

    async def record_movement(
        self,
        material_id: str,
        movement: Movement,
        notes: str | None = None,
        actor: str | None = None,
        related_entry_id: str | None = None,
    ) -> tuple[Material, LedgerTransaction]:
        """Record an already-built movement; returns the updated material too."""
        logger.info(
            "ledger_transaction_started",
            material_id=material_id,
            type=movement.transaction_type.value,
            quantity=movement.recorded_quantity,
        )

        def planner(material: Material) -> tuple[PlannedChange, LedgerTransaction]:
            change = plan_movement(material, movement)
            transaction = LedgerTransaction(
                material_id=material_id,
                transaction_type=movement.transaction_type,
                quantity=movement.recorded_quantity,
                notes=compose_notes(notes, actor, change),
                created_by=actor,
                related_entry_id=related_entry_id,
                balance_after=change.new_stock,
                unit_cost_after=(
                    change.new_unit_cost
                    if change.new_unit_cost is not None
                    else change.previous_unit_cost
                ),
            )
            return change, transaction

        try:
            material, transaction = await self._store.apply_transaction(material_id, planner)
        except InsufficientStockError as e:
            logger.warning(
                "ledger_transaction_rejected",
                material_id=material_id,
                requested=e.details["requested"],
                available=e.details["available"],
            )
            raise

        logger.info(
            "ledger_transaction_complete",
            transaction_id=transaction.id,
            material_id=material_id,
            new_stock=material.current_stock,
            unit_cost=round(material.unit_cost, 4),
        )
        return material, transaction

    async def list_transactions(
        self,
        material_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerTransaction]:
        """Ledger rows newest first."""
        return await self._store.list_transactions(material_id, limit=limit, offset=offset)

    async def get_material(self, material_id: str) -> Material:
        material = await self._store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)
        return material

    async def kardex(self, material_id: str) -> list[KardexEntry]:
        """Full movement history of one material with running balances."""
        material = await self.get_material(material_id)
        transactions = await self._store.list_transactions(material_id)
        return build_kardex(material, transactions)

    async def preview(
        self,
        material_id: str,
        transaction_type: TransactionType | str,
        quantity: Any,
    ) -> TransactionPreview:
        material = await self.get_material(material_id)
        preview = preview_movement(material, transaction_type, quantity)
        if preview is None:
            raise InvalidQuantityError("quantity", quantity, "is not a valid number")
        return preview

    async def verify_stock(self, material_id: str) -> bool:
        """Whether replaying the ledger reproduces the stored stock exactly."""
        material = await self.get_material(material_id)
        transactions = await self._store.list_transactions(material_id)
        replayed = replay_stock(material.opening_stock, transactions)
        if replayed != material.current_stock:
            logger.warning(
                "ledger_replay_mismatch",
                material_id=material_id,
                stored=material.current_stock,
                replayed=replayed,
            )
            return False
        return True
