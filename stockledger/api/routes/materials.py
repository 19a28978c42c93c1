"""Material registry and stock overview endpoints."""

from fastapi import APIRouter, Depends, Query, status
from starlette.responses import Response

from stockledger.api.dependencies import (
    get_create_material_use_case,
    get_delete_material_use_case,
    get_ledger,
    get_ledger_service,
    get_stock_overview_use_case,
)
from stockledger.application.dto.requests import CreateMaterialRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    InventoryOverviewResponse,
    MaterialListResponse,
    MaterialResponse,
)
from stockledger.application.use_cases import (
    CreateMaterialUseCase,
    DeleteMaterialUseCase,
    StockOverviewUseCase,
)
from stockledger.core.interfaces import ILedgerStore
from stockledger.core.services import StockLedgerService

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.post(
    "",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_material(
    request: CreateMaterialRequest,
    use_case: CreateMaterialUseCase = Depends(get_create_material_use_case),
) -> MaterialResponse:
    """Register a material with its opening stock and cost."""
    material = await use_case.execute(request)
    return MaterialResponse.from_entity(material)


@router.get("", response_model=MaterialListResponse)
async def list_materials(
    store: ILedgerStore = Depends(get_ledger),
) -> MaterialListResponse:
    """List all materials ordered by name."""
    materials = await store.list_materials()
    return MaterialListResponse(
        materials=[MaterialResponse.from_entity(m) for m in materials],
        total=len(materials),
    )


@router.get("/overview", response_model=InventoryOverviewResponse)
async def stock_overview(
    search: str | None = Query(default=None, description="Matches name, code or group"),
    category: str | None = Query(default=None, description="Exact category"),
    use_case: StockOverviewUseCase = Depends(get_stock_overview_use_case),
) -> InventoryOverviewResponse:
    """Materials grouped by label, most valuable group first."""
    result = await use_case.execute(search=search, category=category)
    return use_case.to_response(result)


@router.get("/low-stock", response_model=MaterialListResponse)
async def low_stock(
    use_case: StockOverviewUseCase = Depends(get_stock_overview_use_case),
) -> MaterialListResponse:
    """Materials at or below their minimum stock."""
    materials = await use_case.low_stock()
    return MaterialListResponse(
        materials=[MaterialResponse.from_entity(m) for m in materials],
        total=len(materials),
    )


@router.get(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: str,
    service: StockLedgerService = Depends(get_ledger_service),
) -> MaterialResponse:
    """Get one material."""
    material = await service.get_material(material_id)
    return MaterialResponse.from_entity(material)


@router.delete(
    "/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_material(
    material_id: str,
    use_case: DeleteMaterialUseCase = Depends(get_delete_material_use_case),
) -> Response:
    """Delete a material with no ledger history and no BOM lines."""
    await use_case.execute(material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
