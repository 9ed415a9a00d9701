"""
Exception hierarchy for the Markdown File Handler application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and carry an
ErrorKind so background failures can be recorded on a job's status.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    """Classification of failures, recorded on failed jobs."""

    DUPLICATE_ID = "duplicate_id"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    TRANSFER = "transfer"
    EXPIRED_CREDENTIAL = "expired_credential"
    CANCELLED = "cancelled"
    UNKNOWN_JOB = "unknown_job"


class FileHandlerError(Exception):
    """Base exception for all Markdown File Handler errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN_JOB

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(FileHandlerError):
    """Raised when request input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DuplicateJobIdError(FileHandlerError):
    """Raised when a job identifier is registered twice."""

    kind = ErrorKind.DUPLICATE_ID

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job already registered: {job_id}", {"job_id": job_id})


class JobNotFoundError(FileHandlerError):
    """Raised when a job identifier is unknown to the tracker."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}", {"job_id": job_id})


class InvalidTransitionError(FileHandlerError):
    """Raised when a status change would move a job backwards or out of a terminal state."""

    def __init__(self, job_id: str, state: str, action: str) -> None:
        self.job_id = job_id
        self.state = state
        super().__init__(
            f"Cannot {action} job {job_id} in state {state}",
            {"job_id": job_id, "state": state},
        )


class JobActiveError(FileHandlerError):
    """Raised when removing a job that has not reached a terminal state."""

    def __init__(self, job_id: str, state: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job {job_id} is still {state}", {"job_id": job_id})


class RunnerClosedError(FileHandlerError):
    """Raised when submitting to a runner that has been shut down."""

    def __init__(self) -> None:
        super().__init__("Job runner is shut down and no longer accepts jobs")


class AuthError(FileHandlerError):
    """Raised when an access token cannot be obtained."""

    kind = ErrorKind.AUTH

    def __init__(
        self,
        message: str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize auth error.

        Args:
            message: Error message
            resource_id: Resource the token was requested for
            details: Additional context
        """
        details = details or {}
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, details)


class TransferError(FileHandlerError):
    """Raised when an upload or download against the drive API fails."""

    kind = ErrorKind.TRANSFER

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize transfer error.

        Args:
            message: Error message
            status_code: HTTP status code, None for network faults
            url: Request URL that failed
            details: Additional context
        """
        self.status_code = status_code
        self.url = url
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)


class ExpiredCredentialError(TransferError):
    """Raised when the drive API rejects the access token (HTTP 401)."""

    kind = ErrorKind.EXPIRED_CREDENTIAL


class JobCancelledError(FileHandlerError):
    """Raised at a job checkpoint after cancellation was requested."""

    kind = ErrorKind.CANCELLED

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job {job_id} was cancelled", {"job_id": job_id})


class UnknownJobError(FileHandlerError):
    """Raised when a job variant fails in an unexpected way."""

    kind = ErrorKind.UNKNOWN_JOB
