import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from budget_categorizer.api.dependencies import get_service
from budget_categorizer.api.schemas import BulkClassifyRequest, BulkClassifyResponse, ClassifyRequest
from budget_categorizer.manager import CategorizerService
from budget_categorizer.models import CategorizationResult

router = APIRouter()


@router.post("/classify", response_model=CategorizationResult)
async def classify_transaction(
    req: ClassifyRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> CategorizationResult:
    return service.classify(req.transaction, req.rules, req.noise_filters)


@router.post("/classify/bulk", response_model=BulkClassifyResponse)
async def classify_bulk(
    req: BulkClassifyRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> BulkClassifyResponse:
    results = await asyncio.to_thread(
        service.classify_many,
        req.transactions,
        req.rules,
        req.noise_filters,
    )
    matched = sum(1 for result in results if result.confidence > 0)
    return BulkClassifyResponse(results=results, matched=matched)
