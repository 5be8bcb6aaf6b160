"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from redqueue import __version__
from redqueue.api.routes import health_router, queues_router, workers_router
from redqueue.config import get_settings
from redqueue.exceptions import CodecError, StoreUnavailableError
from redqueue.observability.logging import setup_logging
from redqueue.observability.metrics import setup_metrics
from redqueue.observability.tracing import instrument_fastapi, setup_tracing
from redqueue.store.connection import close_redis, init_redis
from redqueue.types.api import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    setup_logging()
    setup_metrics()
    setup_tracing()
    await init_redis()

    logger.info("Application started")

    yield

    await close_redis()
    logger.info("Application shutdown")


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Store unavailable", extra={"path": request.url.path, "primitive": exc.primitive})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ErrorResponse(error="store_unavailable", detail=str(exc)).model_dump(),
    )


async def codec_error_handler(request: Request, exc: CodecError) -> JSONResponse:
    logger.error("Undecodable payload in store", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="malformed_payload", detail=str(exc)).model_dump(),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title="Redqueue API",
        description="Queues, workers and stats of a Redis-backed job queue",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(CodecError, codec_error_handler)

    app.include_router(health_router)
    app.include_router(queues_router)
    app.include_router(workers_router)

    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()

    uvicorn.run(
        "redqueue.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
