"""Abstract interface for material and ledger persistence."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from stockledger.core.entities.ledger import LedgerTransaction, PlannedChange
from stockledger.core.entities.material import Material

# Receives the freshly locked material row and returns the change to commit.
# Raising aborts the write with nothing mutated.
TransactionPlanner = Callable[[Material], tuple[PlannedChange, LedgerTransaction]]


class ILedgerStore(ABC):
    """Interface for material rows and their append-only ledger."""

    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Insert a new material with its opening stock and cost."""
        pass

    @abstractmethod
    async def get_material(self, material_id: str) -> Material | None:
        """Get material by ID."""
        pass

    @abstractmethod
    async def get_material_by_code(self, code: str) -> Material | None:
        """Get material by its human code."""
        pass

    @abstractmethod
    async def list_materials(self) -> list[Material]:
        """List all materials ordered by name."""
        pass

    @abstractmethod
    async def delete_material(self, material_id: str) -> bool:
        """
        Delete a material that nothing references.

        Raises MaterialInUseError when ledger rows or BOM items point at it.
        Returns False when the material does not exist.
        """
        pass

    @abstractmethod
    async def apply_transaction(
        self,
        material_id: str,
        planner: TransactionPlanner,
    ) -> tuple[Material, LedgerTransaction]:
        """
        Atomically mutate a material and append one ledger row.

        The material is read inside a serialized write transaction, passed to
        ``planner``, then updated together with the transaction insert. Either
        both writes commit or neither does.
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        material_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerTransaction]:
        """List ledger rows newest first, optionally for one material."""
        pass
