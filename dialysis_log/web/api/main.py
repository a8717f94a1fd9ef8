"""Main FastAPI application for the web converter.

This module sets up the FastAPI application with all routes, middleware,
and configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dialysis_log import __version__
from dialysis_log.infrastructure.logging_config import setup_logging
from dialysis_log.infrastructure.settings import settings
from dialysis_log.web.api.middleware import setup_middleware
from dialysis_log.web.api.routes import convert, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    setup_logging(use_json=settings.json_logs, log_level=settings.log_level)
    logger.info("Dialysis log converter API starting up...")
    logger.info(f"Upload limit: {settings.converter.max_file_size} bytes")
    yield
    logger.info("Dialysis log converter API shutting down...")


app = FastAPI(
    title="Dialysis Log Converter API",
    description="Decode dialysis machine session logs and download them as CSV",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

setup_middleware(app)

app.include_router(health.router)
app.include_router(convert.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Dialysis Log Converter API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/api/health",
        "convert": "/api/convert"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dialysis_log.web.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info"
    )
