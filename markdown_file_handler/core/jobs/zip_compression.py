"""
Zip compression job.

Downloads a set of drive items, packs them into one zip archive and uploads
the archive into the first item's folder.

Dependencies: zipfile, markdown_file_handler.boundary.graph
System role: Background job variant for "Compress files"
"""

import io
import logging
import zipfile
from collections.abc import Sequence
from pathlib import PurePosixPath

from markdown_file_handler.boundary.graph.graph_client import RemoteContentClient
from markdown_file_handler.boundary.graph.url_helpers import (
    append_path,
    build_child_upload_url,
    parse_base_url,
)
from markdown_file_handler.core.exceptions import ErrorKind
from markdown_file_handler.core.jobs.base import Job, JobContext, JobOutcome
from markdown_file_handler.models.drive import ItemReference

logger = logging.getLogger(__name__)


def unique_entry_name(name: str, used: set[str]) -> str:
    """Return name, or "stem (n).ext" if an entry with that name already exists."""
    if name not in used:
        return name
    path = PurePosixPath(name)
    counter = 2
    while True:
        candidate = f"{path.stem} ({counter}){path.suffix}"
        if candidate not in used:
            return candidate
        counter += 1


class ZipCompressionJob(Job):
    """Add a set of drive items to a new zip archive."""

    job_type = "zip_compression"

    def __init__(self, client: RemoteContentClient, archive_name: str = "Archive.zip") -> None:
        self._client = client
        self._archive_name = archive_name

    def run(self, inputs: Sequence[str], credential: str, context: JobContext) -> JobOutcome:
        if not inputs:
            return JobOutcome.failure(ErrorKind.UNKNOWN_JOB, "No items to compress")

        buffer = io.BytesIO()
        used_names: set[str] = set()
        destination: ItemReference | None = None

        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for index, item_url in enumerate(inputs, start=1):
                context.checkpoint()
                item = self._client.get_item(item_url, credential)
                if destination is None:
                    destination = item.parent_reference
                content = self._client.download_bytes(append_path(item_url, "content"), credential)
                entry_name = unique_entry_name(item.name, used_names)
                used_names.add(entry_name)
                archive.writestr(entry_name, content)
                context.report_progress(f"Added {index} of {len(inputs)}: {entry_name}")

        if destination is None:
            return JobOutcome.failure(
                ErrorKind.TRANSFER, "First item has no parent folder to save the archive in"
            )

        context.checkpoint()
        context.report_progress(f"Uploading {self._archive_name}")
        target_url = build_child_upload_url(
            parse_base_url(inputs[0]), destination.drive_id, destination.id, self._archive_name
        )
        uploaded = self._client.upload_bytes(
            buffer.getvalue(), target_url, credential, "application/zip"
        )
        logger.info("Compressed %d items into %s", len(inputs), self._archive_name)
        return JobOutcome.success(uploaded.web_url or uploaded.id)
