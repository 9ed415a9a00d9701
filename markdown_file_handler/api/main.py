"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, markdown_file_handler.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from markdown_file_handler.api.deps.dependencies import ServiceCache
from markdown_file_handler.configs import Settings, get_settings
from markdown_file_handler.core.exceptions import ValidationError
from markdown_file_handler.observability.logger import configure_logging
from markdown_file_handler.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)
from .routers import file_handler_router, health_router, jobs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Starts the job runner on startup; on shutdown waits for running jobs and
    closes the drive client.
    """
    logger = logging.getLogger("uvicorn")

    cache: ServiceCache = app.state.services
    _ = cache.runner
    _ = cache.graph_client
    logger.info("Job runner started with %d workers", cache.runner.max_workers)

    yield

    cache.clear()
    logger.info("Job runner stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Optional settings override (defaults to environment settings)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Markdown File Handler API",
        description="Preview, edit and save markdown files on OneDrive / SharePoint, "
        "with background PDF conversion and zip compression jobs",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = ServiceCache(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message},
        )

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(file_handler_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")

    return app


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "markdown_file_handler.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )


if __name__ == "__main__":
    main()
