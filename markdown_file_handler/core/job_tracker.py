"""
Job state registry.

Maps job identifiers to their current status for polling. Each entry has its
own lock so updates to one job never wait on another; the registry lock only
guards insertion, lookup and removal of entries.

Dependencies: markdown_file_handler.models.job, markdown_file_handler.core.exceptions
System role: Job tracking business logic
"""

import logging
import threading
from collections.abc import Callable, Mapping

from markdown_file_handler.core.exceptions import (
    DuplicateJobIdError,
    JobActiveError,
    JobNotFoundError,
)
from markdown_file_handler.models.job import JobStatus

logger = logging.getLogger(__name__)


class _TrackedJob:
    __slots__ = ("lock", "status")

    def __init__(self, status: JobStatus) -> None:
        self.lock = threading.Lock()
        self.status = status


class JobTracker:
    """
    In-memory registry of job statuses, safe for concurrent readers and writers.

    Entries live until removed explicitly with remove(); there is no expiry.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _TrackedJob] = {}
        self._entries_lock = threading.Lock()

    def __len__(self) -> int:
        with self._entries_lock:
            return len(self._entries)

    def __contains__(self, job_id: object) -> bool:
        with self._entries_lock:
            return job_id in self._entries

    def _entry(self, job_id: str) -> _TrackedJob:
        with self._entries_lock:
            entry = self._entries.get(job_id)
        if entry is None:
            raise JobNotFoundError(job_id)
        return entry

    def register(
        self,
        job_id: str,
        job_type: str,
        original_parameters: Mapping[str, str] | None = None,
    ) -> JobStatus:
        """
        Create a PENDING status record for a new job.

        Args:
            job_id: New job identifier
            job_type: Job variant name
            original_parameters: Caller's input snapshot

        Returns:
            JobStatus: The registered record

        Raises:
            DuplicateJobIdError: If job_id is already registered
        """
        status = JobStatus(
            job_id=job_id,
            job_type=job_type,
            original_parameters=dict(original_parameters or {}),
        )
        with self._entries_lock:
            if job_id in self._entries:
                raise DuplicateJobIdError(job_id)
            self._entries[job_id] = _TrackedJob(status)
        logger.debug("Registered job %s (%s)", job_id, job_type)
        return status.model_copy(deep=True)

    def get(self, job_id: str) -> JobStatus:
        """
        Get the current status snapshot of a job.

        Raises:
            JobNotFoundError: If job_id is unknown
        """
        entry = self._entry(job_id)
        with entry.lock:
            return entry.status.model_copy(deep=True)

    def update(self, job_id: str, mutator: Callable[[JobStatus], JobStatus]) -> JobStatus:
        """
        Atomically replace a job's status with mutator(current).

        The mutator runs under the job's lock. If it raises, the stored status
        is left unchanged and the exception propagates.

        Args:
            job_id: Job identifier
            mutator: Function producing the next status from the current one

        Returns:
            JobStatus: Snapshot of the new status

        Raises:
            JobNotFoundError: If job_id is unknown
            InvalidTransitionError: If the mutator attempts an illegal transition
        """
        entry = self._entry(job_id)
        with entry.lock:
            updated = mutator(entry.status)
            if updated.job_id != job_id:
                raise ValueError(f"Mutator changed job id {job_id} to {updated.job_id}")
            entry.status = updated
            return updated.model_copy(deep=True)

    def remove(self, job_id: str) -> JobStatus:
        """
        Drop a finished job from the registry.

        Raises:
            JobNotFoundError: If job_id is unknown
            JobActiveError: If the job has not reached a terminal state
        """
        with self._entries_lock:
            entry = self._entries.get(job_id)
            if entry is None:
                raise JobNotFoundError(job_id)
            with entry.lock:
                if not entry.status.is_terminal:
                    raise JobActiveError(job_id, entry.status.state.value)
                del self._entries[job_id]
                status = entry.status
        logger.debug("Removed job %s", job_id)
        return status
