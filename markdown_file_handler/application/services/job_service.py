"""
Job service orchestrator.

Request-facing contract for background jobs: turns activation parameters into
a submitted job, and exposes status polling, cancellation and removal.

Dependencies: markdown_file_handler.core, markdown_file_handler.boundary
System role: Job management orchestration
"""

import logging
from collections.abc import Mapping, Sequence

from markdown_file_handler.boundary.auth.credentials import CredentialProvider
from markdown_file_handler.boundary.graph.graph_client import RemoteContentClient
from markdown_file_handler.boundary.graph.url_helpers import get_resource_from_url
from markdown_file_handler.core.exceptions import ValidationError
from markdown_file_handler.core.job_runner import JobRunner
from markdown_file_handler.core.job_tracker import JobTracker
from markdown_file_handler.core.jobs import Job, PdfConversionJob, ZipCompressionJob
from markdown_file_handler.models.file_handler import ActivationParameters
from markdown_file_handler.models.job import AsyncActionModel, JobStatus

logger = logging.getLogger(__name__)


class JobService:
    """
    Job service orchestrator.

    Builds job variants from activation parameters, obtains the access token
    synchronously (so auth failures reach the caller), and hands the job to the
    runner. Failures after submission are only visible through the job status.
    """

    def __init__(
        self,
        runner: JobRunner,
        tracker: JobTracker,
        content_client: RemoteContentClient,
        zip_archive_name: str = "Archive.zip",
    ) -> None:
        """
        Initialize job service.

        Args:
            runner: Background job runner
            tracker: Registry the runner reports to
            content_client: Drive client handed to job variants
            zip_archive_name: File name for archives created by compress_files
        """
        self.runner = runner
        self.tracker = tracker
        self.content_client = content_client
        self.zip_archive_name = zip_archive_name

    def submit(
        self,
        job: Job,
        inputs: Sequence[str],
        credential: str,
        original_parameters: Mapping[str, str] | None = None,
    ) -> str:
        return self.runner.submit(job, inputs, credential, original_parameters)

    def _submit_for_items(
        self,
        job: Job,
        parameters: ActivationParameters,
        credentials: CredentialProvider,
    ) -> AsyncActionModel:
        if not parameters.item_urls:
            raise ValidationError(
                "Required parameters are missing. Cannot read the source file.",
                field="items",
            )
        try:
            resource = get_resource_from_url(parameters.item_urls[0])
        except ValueError as exc:
            raise ValidationError(str(exc), field="items") from exc

        access_token = credentials.get_access_token(resource)
        job_id = self.submit(job, parameters.item_urls, access_token, parameters.to_dict())
        return AsyncActionModel(job_identifier=job_id, status=self.tracker.get(job_id))

    def convert_to_pdf(
        self,
        parameters: ActivationParameters,
        credentials: CredentialProvider,
    ) -> AsyncActionModel:
        """
        Submit a PDF conversion of the activated item.

        Raises:
            ValidationError: If no item URL was supplied
            AuthError: If no access token is available
        """
        job = PdfConversionJob(self.content_client)
        if len(parameters.item_urls) > 1:
            parameters = parameters.model_copy(update={"item_urls": parameters.item_urls[:1]})
        return self._submit_for_items(job, parameters, credentials)

    def compress_files(
        self,
        parameters: ActivationParameters,
        credentials: CredentialProvider,
    ) -> AsyncActionModel:
        """
        Submit a zip compression of all activated items.

        Raises:
            ValidationError: If no item URL was supplied
            AuthError: If no access token is available
        """
        job = ZipCompressionJob(self.content_client, archive_name=self.zip_archive_name)
        return self._submit_for_items(job, parameters, credentials)

    def get_status(self, job_id: str) -> AsyncActionModel:
        """
        Get job status for polling.

        Raises:
            JobNotFoundError: If the job doesn't exist
        """
        return AsyncActionModel(job_identifier=job_id, status=self.tracker.get(job_id))

    def cancel(self, job_id: str) -> bool:
        return self.runner.cancel(job_id)

    def remove(self, job_id: str) -> JobStatus:
        """
        Forget a finished job.

        Raises:
            JobNotFoundError: If the job doesn't exist
            JobActiveError: If the job is still pending or running
        """
        status = self.tracker.remove(job_id)
        logger.info("Removed job %s in state %s", job_id, status.state.value)
        return status
