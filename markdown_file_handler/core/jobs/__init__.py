"""Background job variants."""

from markdown_file_handler.core.jobs.base import Job, JobContext, JobOutcome
from markdown_file_handler.core.jobs.pdf_conversion import PdfConversionJob
from markdown_file_handler.core.jobs.zip_compression import ZipCompressionJob

__all__ = ["Job", "JobContext", "JobOutcome", "PdfConversionJob", "ZipCompressionJob"]
