"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import (
    CreateMaterialRequest,
    ExecuteKittingRequest,
    InventoryCountRequest,
    PreviewTransactionRequest,
    RecordTransactionRequest,
)
from stockledger.application.dto.responses import (
    ComponentConsumptionResponse,
    CountAdjustmentResponse,
    ErrorResponse,
    HealthResponse,
    InventoryCountResponse,
    InventoryMetricsResponse,
    InventoryOverviewResponse,
    KardexEntryResponse,
    KardexResponse,
    KitExecutionResponse,
    KittingComponentResponse,
    KittingOptionResponse,
    KittingOptionsResponse,
    MaterialGroupResponse,
    MaterialListResponse,
    MaterialResponse,
    RecordTransactionResponse,
    TransactionListResponse,
    TransactionPreviewResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "CreateMaterialRequest",
    "RecordTransactionRequest",
    "PreviewTransactionRequest",
    "InventoryCountRequest",
    "ExecuteKittingRequest",
    # Responses
    "ErrorResponse",
    "HealthResponse",
    "MaterialResponse",
    "MaterialListResponse",
    "MaterialGroupResponse",
    "InventoryMetricsResponse",
    "InventoryOverviewResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "RecordTransactionResponse",
    "TransactionPreviewResponse",
    "KardexEntryResponse",
    "KardexResponse",
    "CountAdjustmentResponse",
    "InventoryCountResponse",
    "KittingComponentResponse",
    "KittingOptionResponse",
    "KittingOptionsResponse",
    "ComponentConsumptionResponse",
    "KitExecutionResponse",
]
