"""API routers."""

from .file_handler import router as file_handler_router
from .health import router as health_router
from .jobs import router as jobs_router

__all__ = [
    "file_handler_router",
    "health_router",
    "jobs_router",
]
