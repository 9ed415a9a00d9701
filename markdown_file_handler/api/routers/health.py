"""
Health check API endpoints.

Routes: GET /health, GET /health/jobs

Dependencies: markdown_file_handler.api.deps
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from markdown_file_handler.api.deps import ServiceCache, get_service_cache


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class JobsHealthResponse(BaseModel):
    """Job runner health response model."""

    status: str
    tracked_jobs: int
    max_workers: int


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/jobs", response_model=JobsHealthResponse)
async def health_check_jobs(
    cache: ServiceCache = Depends(get_service_cache),
) -> JobsHealthResponse:
    """Job runner health check."""
    return JobsHealthResponse(
        status="healthy",
        tracked_jobs=len(cache.tracker),
        max_workers=cache.runner.max_workers,
    )
