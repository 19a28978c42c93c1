"""Application use cases."""

from stockledger.application.use_cases.compute_kitting_options import (
    ComputeKittingOptionsUseCase,
)
from stockledger.application.use_cases.create_material import CreateMaterialUseCase
from stockledger.application.use_cases.delete_material import DeleteMaterialUseCase
from stockledger.application.use_cases.execute_kitting import ExecuteKittingUseCase
from stockledger.application.use_cases.reconcile_counts import (
    ReconcileCountsResult,
    ReconcileCountsUseCase,
)
from stockledger.application.use_cases.record_transaction import (
    RecordTransactionResult,
    RecordTransactionUseCase,
)
from stockledger.application.use_cases.stock_overview import (
    StockOverviewResult,
    StockOverviewUseCase,
)

__all__ = [
    "CreateMaterialUseCase",
    "DeleteMaterialUseCase",
    "RecordTransactionUseCase",
    "RecordTransactionResult",
    "ReconcileCountsUseCase",
    "ReconcileCountsResult",
    "StockOverviewUseCase",
    "StockOverviewResult",
    "ComputeKittingOptionsUseCase",
    "ExecuteKittingUseCase",
]
