"""
Job domain models and schemas.

Status record for background jobs plus request/response schemas for job
tracking endpoints.

Dependencies: pydantic
System role: Job status data model and API contracts
"""

import enum
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator

from markdown_file_handler.core.exceptions import ErrorKind, InvalidTransitionError


class JobState(str, enum.Enum):
    """
    Background job execution states.

    PENDING: Registered, waiting for a worker
    RUNNING: A worker is executing the job
    SUCCEEDED: Job finished; check result for output
    FAILED: Job finished with an error; check error and error_kind
    """

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.SUCCEEDED, JobState.FAILED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(BaseModel):
    """
    Immutable progress/result record for one job.

    Every transition returns a new record, so a snapshot handed to a poller
    never changes underneath it.

    Attributes:
        job_id: Opaque job identifier
        job_type: Job variant name (pdf_conversion, zip_compression, ...)
        state: Current execution state
        original_parameters: Caller's input snapshot, fixed at registration
        progress_message: Latest human-readable progress line
        result: Job output (e.g. URL of the created file), succeeded only
        error: Failure description, failed only
        error_kind: Failure classification, failed only
        created_at: Registration timestamp (UTC)
        started_at: Time the job entered RUNNING
        finished_at: Time the job reached a terminal state
    """

    model_config = ConfigDict(frozen=True)

    job_id: str
    job_type: str
    state: JobState = JobState.PENDING
    original_parameters: dict[str, str] = Field(default_factory=dict)
    progress_message: str | None = None
    result: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @model_validator(mode="after")
    def _check_outcome_fields(self) -> "JobStatus":
        if self.result is not None and self.state is not JobState.SUCCEEDED:
            raise ValueError("result may only be set on a succeeded job")
        failed = self.state is JobState.FAILED
        if failed != bool(self.error) or failed != (self.error_kind is not None):
            raise ValueError("error and error_kind must be set exactly when the job failed")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def _require(self, *allowed: JobState, action: str) -> None:
        if self.state not in allowed:
            raise InvalidTransitionError(self.job_id, self.state.value, action)

    def _evolve(self, **changes) -> "JobStatus":
        # model_copy skips validation; every transition is re-checked
        return JobStatus.model_validate({**self.model_dump(), **changes})

    def mark_running(self) -> "JobStatus":
        self._require(JobState.PENDING, action="start")
        return self._evolve(state=JobState.RUNNING, started_at=_utcnow())

    def with_progress(self, message: str) -> "JobStatus":
        self._require(JobState.RUNNING, action="report progress")
        return self._evolve(progress_message=message)

    def mark_succeeded(self, result: str | None) -> "JobStatus":
        self._require(JobState.RUNNING, action="succeed")
        return self._evolve(state=JobState.SUCCEEDED, result=result, finished_at=_utcnow())

    def mark_failed(self, kind: ErrorKind, error: str) -> "JobStatus":
        self._require(JobState.PENDING, JobState.RUNNING, action="fail")
        return self._evolve(
            state=JobState.FAILED,
            error=error or kind.value,
            error_kind=kind,
            finished_at=_utcnow(),
        )


class AsyncActionModel(BaseModel):
    """Response schema returned when a job is submitted or polled."""

    job_identifier: str
    status: JobStatus


class CancelJobResponse(BaseModel):
    """Response schema for a cancellation request."""

    job_identifier: str
    cancelled: bool = Field(description="False when the job had already finished")
