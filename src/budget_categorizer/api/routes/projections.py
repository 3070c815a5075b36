from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from budget_categorizer.api.dependencies import get_projection_scanner
from budget_categorizer.api.schemas import ProjectionScanRequest
from budget_categorizer.logger import get_logger
from budget_categorizer.models import ProjectionSuggestion
from budget_categorizer.services.projections import ProjectionScanner

logger = get_logger(__name__)

router = APIRouter()


@router.post("/projections/scan", response_model=list[ProjectionSuggestion])
async def scan_projections(
    req: ProjectionScanRequest,
    scanner: Annotated[ProjectionScanner, Depends(get_projection_scanner)],
) -> list[ProjectionSuggestion]:
    if scanner.active:
        raise HTTPException(status_code=409, detail="Projection scan in progress")
    return await scanner.scan(req.transactions)


@router.get("/projections/status")
async def get_projection_status(
    scanner: Annotated[ProjectionScanner, Depends(get_projection_scanner)],
) -> dict:
    return scanner.get_status()


@router.post("/projections/cancel")
async def cancel_projection_scan(
    scanner: Annotated[ProjectionScanner, Depends(get_projection_scanner)],
) -> dict[str, str]:
    if scanner.request_cancel():
        logger.info("[PROJECT] Cancel requested by user.")
        return {"status": "cancelling"}
    return {"status": "idle"}
