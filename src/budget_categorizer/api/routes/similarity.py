from typing import Annotated

from fastapi import APIRouter, Depends

from budget_categorizer.analysis.similarity import SimilarityMatcher, find_rule_matches
from budget_categorizer.api.dependencies import get_service
from budget_categorizer.api.schemas import RuleMatchesRequest, SimilarRequest, SimilarResponse
from budget_categorizer.core.profiles import STRICT, get_profile
from budget_categorizer.logger import get_logger
from budget_categorizer.manager import CategorizerService
from budget_categorizer.models import RawTransaction

logger = get_logger(__name__)

router = APIRouter()


@router.post("/similar", response_model=SimilarResponse)
async def find_similar_transactions(
    req: SimilarRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> SimilarResponse:
    noise_filters = service.noise_filters if req.noise_filters is None else req.noise_filters
    matcher = SimilarityMatcher(get_profile(req.profile, STRICT), noise_filters)
    target = req.target_name if req.target_name is not None else req.reference.name
    matches = matcher.find_similar(req.reference, req.pool, target, req.mode)
    return SimilarResponse(matches=matches)


@router.post("/rules/matches", response_model=list[RawTransaction])
async def preview_rule_matches(
    req: RuleMatchesRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> list[RawTransaction]:
    noise_filters = service.noise_filters if req.noise_filters is None else req.noise_filters
    matches = find_rule_matches(req.rule, req.transactions, noise_filters)
    logger.info(
        "[SIMILAR] Rule '%s' would apply to %d of %d transactions.",
        req.rule.identifying_name,
        len(matches),
        len(req.transactions),
    )
    return matches
