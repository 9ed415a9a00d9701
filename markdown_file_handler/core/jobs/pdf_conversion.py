"""
PDF conversion job.

Asks the drive to render an item as PDF and saves the rendition next to the
source item. The conversion itself is performed by the drive service.

Dependencies: markdown_file_handler.boundary.graph
System role: Background job variant for "Convert to PDF"
"""

import logging
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

logger = logging.getLogger(__name__)


class PdfConversionJob(Job):
    """Convert one drive item to PDF and upload it alongside the original."""

    job_type = "pdf_conversion"

    def __init__(self, client: RemoteContentClient) -> None:
        self._client = client

    def run(self, inputs: Sequence[str], credential: str, context: JobContext) -> JobOutcome:
        if len(inputs) != 1:
            return JobOutcome.failure(
                ErrorKind.UNKNOWN_JOB, f"PDF conversion takes one item, got {len(inputs)}"
            )
        item_url = inputs[0]

        item = self._client.get_item(item_url, credential)
        if item.parent_reference is None:
            return JobOutcome.failure(
                ErrorKind.TRANSFER, f"Item {item.name} has no parent folder to save the PDF in"
            )

        context.report_progress(f"Converting {item.name} to PDF")
        context.checkpoint()
        pdf = self._client.download_bytes(
            append_path(item_url, "content", {"format": "pdf"}), credential
        )

        context.checkpoint()
        pdf_name = f"{PurePosixPath(item.name).stem or item.name}.pdf"
        context.report_progress(f"Uploading {pdf_name}")
        target_url = build_child_upload_url(
            parse_base_url(item_url),
            item.parent_reference.drive_id,
            item.parent_reference.id,
            pdf_name,
        )
        uploaded = self._client.upload_bytes(pdf, target_url, credential, "application/pdf")
        logger.info("Converted %s to %s (%d bytes)", item.name, pdf_name, len(pdf))
        return JobOutcome.success(uploaded.web_url or uploaded.id)
