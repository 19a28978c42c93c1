"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests swap them through
``app.dependency_overrides``.
"""

from stockledger.application.use_cases import (
    ComputeKittingOptionsUseCase,
    CreateMaterialUseCase,
    DeleteMaterialUseCase,
    ExecuteKittingUseCase,
    ReconcileCountsUseCase,
    RecordTransactionUseCase,
    StockOverviewUseCase,
)
from stockledger.config import Settings, get_settings
from stockledger.core.interfaces import ILedgerStore
from stockledger.core.services import StockLedgerService
from stockledger.infrastructure.storage.sqlite import get_ledger_store


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


async def get_ledger() -> ILedgerStore:
    """Get material and ledger store."""
    return await get_ledger_store()


async def get_ledger_service() -> StockLedgerService:
    """Get stock ledger service bound to the SQLite store."""
    return StockLedgerService(await get_ledger_store())


def get_create_material_use_case() -> CreateMaterialUseCase:
    return CreateMaterialUseCase()


def get_delete_material_use_case() -> DeleteMaterialUseCase:
    return DeleteMaterialUseCase()


def get_stock_overview_use_case() -> StockOverviewUseCase:
    return StockOverviewUseCase()


def get_record_transaction_use_case() -> RecordTransactionUseCase:
    return RecordTransactionUseCase()


def get_reconcile_counts_use_case() -> ReconcileCountsUseCase:
    return ReconcileCountsUseCase()


def get_kitting_options_use_case() -> ComputeKittingOptionsUseCase:
    return ComputeKittingOptionsUseCase()


def get_execute_kitting_use_case() -> ExecuteKittingUseCase:
    return ExecuteKittingUseCase()
