"""
Background job execution.

Submits jobs to a bounded worker pool and returns their identifier at once.
Workers never touch the tracker: they post status events to a FIFO queue and a
single dispatcher thread applies them, so each job's transitions are written in
the order they happened (PENDING -> RUNNING -> SUCCEEDED | FAILED).

Dependencies: concurrent.futures, markdown_file_handler.core.job_tracker,
    markdown_file_handler.core.jobs
System role: Asynchronous job dispatch and completion handling
"""

import contextvars
import enum
import logging
import queue
import secrets
import threading
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from markdown_file_handler.core.exceptions import (
    ErrorKind,
    JobNotFoundError,
    RunnerClosedError,
    UnknownJobError,
)
from markdown_file_handler.core.job_tracker import JobTracker
from markdown_file_handler.core.jobs.base import Job, JobContext, JobOutcome
from markdown_file_handler.models.job import JobStatus
from markdown_file_handler.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)


def new_job_id() -> str:
    """Generate a 128-bit random job identifier."""
    return secrets.token_hex(16)


class EventType(str, enum.Enum):
    RUNNING = "running"
    PROGRESS = "progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class StatusEvent:
    """A status change posted by a worker for the dispatcher to apply."""

    job_id: str
    type: EventType
    message: str | None = None
    outcome: JobOutcome | None = None

    def apply(self, status: JobStatus) -> JobStatus:
        if self.type is EventType.RUNNING:
            return status.mark_running()
        if self.type is EventType.PROGRESS:
            return status.with_progress(self.message or "")
        outcome = self.outcome
        if outcome.succeeded:
            return status.mark_succeeded(outcome.result)
        return status.mark_failed(outcome.error_kind, outcome.error)


@dataclass
class _ActiveJob:
    cancel_event: threading.Event
    future: Future | None = None


class JobRunner:
    """
    Runs jobs off the request path and reports their progress to a JobTracker.

    Usage:
        runner = JobRunner(tracker, max_workers=4)
        job_id = runner.submit(PdfConversionJob(client), [item_url], token)
        tracker.get(job_id)  # poll
    """

    def __init__(
        self,
        tracker: JobTracker,
        max_workers: int = 4,
        id_factory: Callable[[], str] = new_job_id,
    ) -> None:
        """
        Initialize runner and start the status dispatcher.

        Args:
            tracker: Registry receiving status updates
            max_workers: Size of the worker pool
            id_factory: Job identifier generator
        """
        self._tracker = tracker
        self._id_factory = id_factory
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="job-worker"
        )
        self._events: queue.Queue[StatusEvent | None] = queue.Queue()
        # Jobs that have not posted their FINISHED event yet
        self._active: dict[str, _ActiveJob] = {}
        self._lock = threading.Lock()
        self._closed = False
        self._dispatcher = threading.Thread(
            target=self._dispatch_events, name="job-status-dispatcher", daemon=True
        )
        self._dispatcher.start()

    @property
    def tracker(self) -> JobTracker:
        return self._tracker

    def submit(
        self,
        job: Job,
        inputs: Sequence[str],
        credential: str,
        original_parameters: Mapping[str, str] | None = None,
    ) -> str:
        """
        Register a job and schedule it on the worker pool.

        Returns as soon as the job is registered; execution happens later on a
        worker thread.

        Args:
            job: Job variant instance
            inputs: Job inputs
            credential: Access token handed to the job as-is
            original_parameters: Caller's input snapshot (defaults to the inputs)

        Returns:
            str: Job identifier for polling

        Raises:
            RunnerClosedError: If the runner has been shut down
            DuplicateJobIdError: If the generated identifier is already in use
        """
        inputs = tuple(inputs)
        if original_parameters is None:
            original_parameters = {f"input_{i}": value for i, value in enumerate(inputs)}

        with self._lock:
            if self._closed:
                raise RunnerClosedError()
            job_id = self._id_factory()
            self._tracker.register(job_id, job.job_type, original_parameters)
            active = _ActiveJob(cancel_event=threading.Event())
            self._active[job_id] = active
            # Run inside the submitter's context so correlation ids follow the job.
            ctx = contextvars.copy_context()
            active.future = self._executor.submit(
                ctx.run, self._execute, job_id, job, inputs, credential, active.cancel_event
            )

        log_with_context(
            logger,
            logging.INFO,
            f"Submitted {job.job_type} job {job_id}",
            job_id=job_id,
            job_type=job.job_type,
            input_count=len(inputs),
        )
        return job_id

    def get_status(self, job_id: str) -> JobStatus:
        return self._tracker.get(job_id)

    def cancel(self, job_id: str) -> bool:
        """
        Request cooperative cancellation of a job.

        The job stops at its next checkpoint and ends FAILED with kind CANCELLED.
        A job that completes its work after the request is recorded as
        cancelled too, so an accepted cancellation never leaves a result.

        Returns:
            bool: True if the job was still active, False if it had finished

        Raises:
            JobNotFoundError: If job_id is unknown
        """
        self._tracker.get(job_id)
        with self._lock:
            active = self._active.get(job_id)
            if active is None:
                return False
            active.cancel_event.set()
        logger.info("Cancellation requested for job %s", job_id)
        return True

    def drain(self) -> None:
        """Block until every posted status event has been applied."""
        self._events.join()

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting jobs, then stop workers and the dispatcher.

        With wait=True queued jobs still run and the call returns once every
        status is written. With wait=False queued jobs that have not started are
        failed as cancelled, running jobs finish in the background and their
        statuses are still written.

        Args:
            wait: Block until workers and the dispatcher have stopped
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        if wait:
            self._executor.shutdown(wait=True)
            self._events.put(None)
            self._dispatcher.join()
            logger.info("Job runner shut down")
            return

        self._executor.shutdown(wait=False, cancel_futures=True)
        self._fail_unstarted_jobs()
        threading.Thread(
            target=self._stop_dispatcher_after_workers,
            name="job-runner-shutdown",
            daemon=True,
        ).start()
        logger.info("Job runner shutting down in the background")

    def _fail_unstarted_jobs(self) -> None:
        with self._lock:
            unstarted = [
                job_id
                for job_id, active in self._active.items()
                if active.future is not None and active.future.cancelled()
            ]
            for job_id in unstarted:
                del self._active[job_id]
                self._post(
                    StatusEvent(
                        job_id,
                        EventType.FINISHED,
                        outcome=JobOutcome.failure(
                            ErrorKind.CANCELLED, "Job runner shut down before the job started"
                        ),
                    )
                )
        if unstarted:
            logger.warning("Cancelled %d queued jobs at shutdown", len(unstarted))

    def _stop_dispatcher_after_workers(self) -> None:
        self._executor.shutdown(wait=True)
        self._events.put(None)

    def _post(self, event: StatusEvent) -> None:
        self._events.put(event)

    def _execute(
        self,
        job_id: str,
        job: Job,
        inputs: tuple[str, ...],
        credential: str,
        cancel_event: threading.Event,
    ) -> None:
        context = JobContext(
            job_id,
            cancel_event=cancel_event,
            on_progress=lambda message: self._post(
                StatusEvent(job_id, EventType.PROGRESS, message=message)
            ),
        )
        outcome: JobOutcome | None = None
        try:
            self._post(StatusEvent(job_id, EventType.RUNNING))
            context.checkpoint()
            outcome = job.execute(inputs, credential, context)
            if not isinstance(outcome, JobOutcome):
                raise UnknownJobError(
                    f"{job.job_type} returned {type(outcome).__name__} instead of an outcome"
                )
        except Exception as exc:
            outcome = JobOutcome.from_exception(exc)
            if outcome.error_kind is ErrorKind.UNKNOWN_JOB:
                log_exception_with_context(
                    logger, f"Job {job_id} crashed", exc, job_id=job_id, job_type=job.job_type
                )
        finally:
            if outcome is None:
                outcome = JobOutcome.failure(
                    ErrorKind.UNKNOWN_JOB, "Job terminated without producing an outcome"
                )
            # Deciding the outcome and leaving _active happen under the lock
            # that cancel() takes, so an accepted cancel always wins.
            with self._lock:
                if outcome.succeeded and cancel_event.is_set():
                    outcome = JobOutcome.failure(
                        ErrorKind.CANCELLED, f"Job {job_id} was cancelled"
                    )
                self._active.pop(job_id, None)
                self._post(StatusEvent(job_id, EventType.FINISHED, outcome=outcome))

        log_with_context(
            logger,
            logging.INFO if outcome.succeeded else logging.WARNING,
            f"Job {job_id} finished: {'succeeded' if outcome.succeeded else outcome.error}",
            job_id=job_id,
            job_type=job.job_type,
            error_kind=outcome.error_kind.value if outcome.error_kind else None,
        )

    def _record_unapplied_outcome(self, event: StatusEvent, exc: Exception) -> None:
        """Write a FAILED status when a FINISHED event could not be applied."""
        message = f"Could not record job outcome: {type(exc).__name__}"
        try:
            self._tracker.update(
                event.job_id, lambda status: status.mark_failed(ErrorKind.UNKNOWN_JOB, message)
            )
        except Exception as fallback_exc:
            log_exception_with_context(
                logger,
                "Failed to record job failure",
                fallback_exc,
                job_id=event.job_id,
            )

    def _dispatch_events(self) -> None:
        while True:
            event = self._events.get()
            try:
                if event is None:
                    return
                self._tracker.update(event.job_id, event.apply)
            except JobNotFoundError:
                logger.warning("Dropping %s event for unknown job %s", event.type.value, event.job_id)
            except Exception as exc:
                log_exception_with_context(
                    logger,
                    "Failed to apply job status event",
                    exc,
                    job_id=event.job_id,
                    event_type=event.type.value,
                )
                if event.type is EventType.FINISHED:
                    self._record_unapplied_outcome(event, exc)
            finally:
                self._events.task_done()
