"""
Job contract shared by all background job variants.

A job is one unit of long-running work expressed as
run(inputs, credential, context) -> JobOutcome, with no dependency on the web
layer. The runner owns scheduling and status tracking; a job only does its work,
calls context.checkpoint() between steps and reports progress.

Dependencies: markdown_file_handler.core.exceptions
System role: Execution contract for PDF conversion, zip compression, ...
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import ClassVar

from markdown_file_handler.core.exceptions import (
    ErrorKind,
    FileHandlerError,
    JobCancelledError,
)


@dataclass(frozen=True)
class JobOutcome:
    """Explicit result of a job run: a result payload or an error kind with message."""

    succeeded: bool
    result: str | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.succeeded:
            if self.error is not None or self.error_kind is not None:
                raise ValueError("A successful outcome cannot carry an error")
        else:
            if self.result is not None:
                raise ValueError("A failed outcome cannot carry a result")
            if not isinstance(self.error_kind, ErrorKind):
                raise ValueError("A failed outcome needs an error kind")

    @classmethod
    def success(cls, result: str | None = None) -> "JobOutcome":
        return cls(succeeded=True, result=result)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "JobOutcome":
        return cls(succeeded=False, error_kind=kind, error=message or kind.value)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "JobOutcome":
        if isinstance(exc, FileHandlerError):
            return cls.failure(exc.kind, exc.message)
        detail = str(exc)
        message = f"{type(exc).__name__}: {detail}" if detail else type(exc).__name__
        return cls.failure(ErrorKind.UNKNOWN_JOB, message)


class JobContext:
    """
    Runtime handle passed to a running job.

    Gives the job its identifier, a cooperative cancellation checkpoint and a
    way to publish progress lines.
    """

    def __init__(
        self,
        job_id: str,
        cancel_event: threading.Event | None = None,
        on_progress: Callable[[str], None] | None = None,
    ) -> None:
        self.job_id = job_id
        self._cancel_event = cancel_event or threading.Event()
        self._on_progress = on_progress

    def checkpoint(self) -> None:
        """
        Stop here if cancellation was requested.

        Raises:
            JobCancelledError: If the job has been cancelled
        """
        if self._cancel_event.is_set():
            raise JobCancelledError(self.job_id)

    def report_progress(self, message: str) -> None:
        if self._on_progress is not None:
            self._on_progress(message)


class Job(ABC):
    """Base class for background job variants."""

    job_type: ClassVar[str] = "job"

    @abstractmethod
    def run(
        self,
        inputs: Sequence[str],
        credential: str,
        context: JobContext,
    ) -> JobOutcome:
        """
        Perform the job's work.

        Args:
            inputs: Job inputs (item URLs for the drive jobs)
            credential: Access token for the drive API, passed by value
            context: Cancellation checkpoint and progress reporting

        Returns:
            JobOutcome: Success with result payload, or failure with error kind

        Raises:
            FileHandlerError: Typed failures from the transfer layer
        """

    def execute(
        self,
        inputs: Sequence[str],
        credential: str,
        context: JobContext,
    ) -> JobOutcome:
        """
        Run the job and turn typed failures into a failed outcome.

        Cancellation is left to propagate so the runner records it as such.
        Unexpected exceptions also propagate and are classified by the runner.
        """
        try:
            return self.run(inputs, credential, context)
        except JobCancelledError:
            raise
        except FileHandlerError as exc:
            return JobOutcome.from_exception(exc)
