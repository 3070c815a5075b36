from fastapi import HTTPException, Request

from budget_categorizer.manager import CategorizerService
from budget_categorizer.services.projections import ProjectionScanner


def get_service(request: Request) -> CategorizerService:
    service = getattr(request.app.state, "service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_projection_scanner(request: Request) -> ProjectionScanner:
    scanner = getattr(request.app.state, "projection_scanner", None)
    if not scanner:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return scanner
