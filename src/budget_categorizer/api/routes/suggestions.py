import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from budget_categorizer.analysis.rule_health import score_rules
from budget_categorizer.api.dependencies import get_service
from budget_categorizer.api.schemas import RuleHealthRequest, RuleHealthResponse, ScanRequest
from budget_categorizer.core import settings
from budget_categorizer.manager import CategorizerService
from budget_categorizer.models import MerchantSuggestion
from budget_categorizer.services.suggestions import SuggestionScanner

router = APIRouter()


@router.post("/suggestions/scan", response_model=list[MerchantSuggestion])
async def scan_suggestions(
    req: ScanRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> list[MerchantSuggestion]:
    noise_filters = service.noise_filters if req.noise_filters is None else req.noise_filters
    limit = req.limit if req.limit is not None else settings.get_suggestion_limit()
    scanner = SuggestionScanner(noise_filters=noise_filters, limit=limit)
    return await asyncio.to_thread(scanner.scan, req.transactions)


@router.post("/rules/health", response_model=RuleHealthResponse)
async def rule_health(
    req: RuleHealthRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> RuleHealthResponse:
    noise_filters = service.noise_filters if req.noise_filters is None else req.noise_filters
    return RuleHealthResponse(scores=score_rules(req.rules, req.transactions, noise_filters))
