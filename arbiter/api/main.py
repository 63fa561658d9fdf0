"""FastAPI application entry point for the dispute arbiter.

Run with:
    uvicorn arbiter.api.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from arbiter import __version__
from arbiter.api.dependencies import get_app_config
from arbiter.api.middleware import LoggingMiddleware
from arbiter.api.routes import (
    adjudication_router,
    disputes_router,
    health_router,
    parties_router,
    transcription_router,
    turns_router,
)
from arbiter.bootstrap.database import dispose_engine
from arbiter.bootstrap.logging import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup and release pooled connections on shutdown."""
    config = get_app_config()
    configure_logging(config.environment)
    logger.info("arbiter_starting", environment=config.environment, version=__version__)
    yield
    await dispose_engine()
    logger.info("arbiter_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="Dispute Arbiter API",
        description="Records both sides of an argument and returns a verdict",
        version=__version__,
        lifespan=lifespan,
    )
    application.add_middleware(LoggingMiddleware)

    application.include_router(health_router)
    application.include_router(parties_router)
    application.include_router(disputes_router)
    application.include_router(turns_router)
    application.include_router(adjudication_router)
    application.include_router(transcription_router)
    return application


app = create_app()
