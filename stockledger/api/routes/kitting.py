"""Kitting feasibility and execution endpoints."""

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import (
    get_execute_kitting_use_case,
    get_kitting_options_use_case,
)
from stockledger.application.dto.requests import ExecuteKittingRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    KitExecutionResponse,
    KittingOptionResponse,
    KittingOptionsResponse,
)
from stockledger.application.use_cases import (
    ComputeKittingOptionsUseCase,
    ExecuteKittingUseCase,
)

router = APIRouter(prefix="/api/kitting", tags=["kitting"])


@router.get("/options", response_model=KittingOptionsResponse)
async def kitting_options(
    use_case: ComputeKittingOptionsUseCase = Depends(get_kitting_options_use_case),
) -> KittingOptionsResponse:
    """How many kits of each product current stock allows."""
    options = await use_case.execute()
    return KittingOptionsResponse(
        options=[KittingOptionResponse.from_entity(o) for o in options],
        total=len(options),
    )


@router.post(
    "/execute",
    response_model=KitExecutionResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def execute_kitting(
    request: ExecuteKittingRequest,
    use_case: ExecuteKittingUseCase = Depends(get_execute_kitting_use_case),
) -> KitExecutionResponse:
    """
    Consume components and receive the finished good.

    Partial outcomes are reported in ``status``; nothing is rolled back.
    """
    result = await use_case.execute_for_product(
        request.product_id, request.quantity, actor=request.actor
    )
    return KitExecutionResponse.from_entity(result)
