from fastapi import APIRouter

from budget_categorizer.api.schemas import TriageRequest
from budget_categorizer.services.triage import TriageReport, build_triage_report

router = APIRouter()


@router.post("/triage", response_model=TriageReport)
async def triage_transactions(req: TriageRequest) -> TriageReport:
    return build_triage_report(req.transactions)
