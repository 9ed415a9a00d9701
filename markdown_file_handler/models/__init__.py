"""Data models and API schemas."""

from markdown_file_handler.models.drive import DriveItem, FileData, ItemReference
from markdown_file_handler.models.file_handler import (
    ActivationParameters,
    FileAccess,
    MarkdownFileModel,
    SaveResults,
)
from markdown_file_handler.models.job import (
    AsyncActionModel,
    CancelJobResponse,
    ErrorKind,
    JobState,
    JobStatus,
)

__all__ = [
    "ActivationParameters",
    "AsyncActionModel",
    "CancelJobResponse",
    "DriveItem",
    "ErrorKind",
    "FileAccess",
    "FileData",
    "ItemReference",
    "JobState",
    "JobStatus",
    "MarkdownFileModel",
    "SaveResults",
]
