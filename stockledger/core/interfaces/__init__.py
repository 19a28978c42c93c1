"""Abstract interfaces for infrastructure components."""

from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.interfaces.ledger_store import ILedgerStore, TransactionPlanner

__all__ = [
    "ICatalogStore",
    "ILedgerStore",
    "TransactionPlanner",
]
