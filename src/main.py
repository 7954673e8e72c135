"""FastAPI application factory."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.v1.router import api_router
from src.core.config import settings
from src.core.exceptions import register_exception_handlers
from src.core.logging import configure_logging
from src.db.session import dispose_engine
from src.schedulers.scheduler import shutdown_scheduler, start_scheduler
from src.services.limits import close_client


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s (env=%s)", settings.PROJECT_NAME, settings.ENV)
    start_scheduler()
    try:
        yield
    finally:
        shutdown_scheduler()
        await close_client()
        await dispose_engine()
        logger.info("Shutdown complete")


def create_application() -> FastAPI:
    """Build the API application with routers and error handlers attached."""

    application = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    register_exception_handlers(application)
    application.include_router(api_router, prefix=f"{settings.API_PREFIX}/v1")

    @application.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "env": settings.ENV}

    return application


app = create_application()

__all__ = ["create_application", "app"]
