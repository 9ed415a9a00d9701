"""
Error handling utilities for the file handler and job routers.

A decorator that maps domain exceptions to HTTPExceptions so endpoints only
contain the happy path.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from markdown_file_handler.core.exceptions import (
    AuthError,
    DuplicateJobIdError,
    JobActiveError,
    JobNotFoundError,
    RunnerClosedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_job_errors(func: F) -> F:
    """
    Decorator to transform job and file handler errors into HTTPExceptions.

    This centralizes:
    - Logging of errors with context (job_id)
    - Mapping specific exceptions to HTTP status codes
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except JobNotFoundError as e:
            logger.warning("Job not found", extra={"job_id": e.job_id})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except JobActiveError as e:
            logger.warning("Job still active", extra={"job_id": e.job_id})
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

        except ValidationError as e:
            logger.warning("Invalid activation parameters", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except AuthError as e:
            logger.warning("No credential for request", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

        except (RunnerClosedError, DuplicateJobIdError) as e:
            logger.error("Job submission rejected", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    return wrapper  # type: ignore
