"""Service orchestrators."""

from .file_service import FileService
from .job_service import JobService

__all__ = [
    "FileService",
    "JobService",
]
