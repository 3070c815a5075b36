from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from budget_categorizer.api.routes import classify, projections, similarity, suggestions, triage
from budget_categorizer.core import settings
from budget_categorizer.logger import get_logger, setup_logging
from budget_categorizer.manager import CategorizerService
from budget_categorizer.services.projections import ProjectionScanner

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        noise_filters = settings.get_noise_filters()
        if not noise_filters:
            logger.info("NOISE_FILTERS not set. Only built-in cleaning rules will apply.")

        app.state.service = CategorizerService(noise_filters=noise_filters)
        app.state.projection_scanner = ProjectionScanner(
            chunk_size=settings.get_scan_chunk_size(),
            workers=settings.get_scan_workers(),
        )

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Budget Categorizer", lifespan=lifespan)

    app.include_router(classify.router)
    app.include_router(suggestions.router)
    app.include_router(similarity.router)
    app.include_router(triage.router)
    app.include_router(projections.router)

    return app


app = create_app()
