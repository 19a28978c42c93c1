"""Stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_app_settings,
    get_ledger_service,
    get_reconcile_counts_use_case,
    get_record_transaction_use_case,
)
from stockledger.application.dto.requests import (
    InventoryCountRequest,
    PreviewTransactionRequest,
    RecordTransactionRequest,
)
from stockledger.application.dto.responses import (
    ErrorResponse,
    InventoryCountResponse,
    KardexEntryResponse,
    KardexResponse,
    MaterialResponse,
    RecordTransactionResponse,
    TransactionListResponse,
    TransactionPreviewResponse,
    TransactionResponse,
)
from stockledger.application.use_cases import ReconcileCountsUseCase, RecordTransactionUseCase
from stockledger.config import Settings
from stockledger.core.services import StockLedgerService

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post(
    "/transactions",
    response_model=RecordTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_transaction(
    request: RecordTransactionRequest,
    use_case: RecordTransactionUseCase = Depends(get_record_transaction_use_case),
) -> RecordTransactionResponse:
    """Record an IN, OUT or ADJ movement."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    material_id: str | None = None,
    limit: int | None = Query(default=None, gt=0),
    offset: int = Query(default=0, ge=0),
    service: StockLedgerService = Depends(get_ledger_service),
    settings: Settings = Depends(get_app_settings),
) -> TransactionListResponse:
    """Ledger rows newest first."""
    limit = limit or settings.ledger.history_page_size
    transactions = await service.list_transactions(material_id, limit=limit, offset=offset)
    return TransactionListResponse(
        transactions=[TransactionResponse.from_entity(t) for t in transactions],
        total=len(transactions),
        limit=limit,
        offset=offset,
    )


@router.post(
    "/preview",
    response_model=TransactionPreviewResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def preview_transaction(
    request: PreviewTransactionRequest,
    service: StockLedgerService = Depends(get_ledger_service),
) -> TransactionPreviewResponse:
    """Stock before and after a movement, without writing it."""
    preview = await service.preview(request.material_id, request.type, request.quantity)
    return TransactionPreviewResponse(
        material_id=request.material_id,
        type=request.type.value,
        current=preview.current,
        future=preview.future,
        diff=preview.diff,
    )


@router.get(
    "/{material_id}/kardex",
    response_model=KardexResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_kardex(
    material_id: str,
    service: StockLedgerService = Depends(get_ledger_service),
) -> KardexResponse:
    """Full movement history of a material with running balances."""
    material = await service.get_material(material_id)
    entries = await service.kardex(material_id)
    final = entries[-1].balance_after if entries else material.opening_stock
    return KardexResponse(
        material=MaterialResponse.from_entity(material),
        opening_stock=material.opening_stock,
        entries=[KardexEntryResponse.from_entity(e) for e in entries],
        consistent=final == material.current_stock,
    )


@router.post(
    "/counts",
    response_model=InventoryCountResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def reconcile_counts(
    request: InventoryCountRequest,
    use_case: ReconcileCountsUseCase = Depends(get_reconcile_counts_use_case),
) -> InventoryCountResponse:
    """Apply a physical count: one ADJ per divergent material."""
    result = await use_case.execute(request.counts, actor=request.actor)
    return use_case.to_response(result)
