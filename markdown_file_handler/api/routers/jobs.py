"""
Job API endpoints.

Routes: GET /jobs/{id}, POST /jobs/{id}/cancel, DELETE /jobs/{id}

Dependencies: markdown_file_handler.application.services.job_service, markdown_file_handler.models
System role: Job status HTTP API
"""

from fastapi import APIRouter, Depends, Response, status

from markdown_file_handler.api.deps import get_job_service
from markdown_file_handler.api.routers.error_handling import handle_job_errors
from markdown_file_handler.application.services.job_service import JobService
from markdown_file_handler.models.job import AsyncActionModel, CancelJobResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=AsyncActionModel)
@handle_job_errors
async def get_job_status(
    job_id: str,
    job_service: JobService = Depends(get_job_service),
) -> AsyncActionModel:
    """
    Get job status for polling.

    Clients should poll while status.state is "pending" or "running". A
    finished job has either status.result (succeeded) or status.error and
    status.error_kind (failed), never both.

    Example Response:
        {
            "job_identifier": "5f0c6a1e9b2d4c7e8a3f1b6d2e9c4a70",
            "status": {
                "job_id": "5f0c6a1e9b2d4c7e8a3f1b6d2e9c4a70",
                "job_type": "pdf_conversion",
                "state": "succeeded",
                "original_parameters": {"items": "[\"https://x/drive/items/42\"]"},
                "progress_message": "Uploading notes.pdf",
                "result": "https://x/personal/notes.pdf",
                "error": null,
                "error_kind": null,
                ...
            }
        }

    Raises:
        HTTPException(404): Job not found
    """
    return job_service.get_status(job_id)


@router.post("/{job_id}/cancel", response_model=CancelJobResponse)
@handle_job_errors
async def cancel_job(
    job_id: str,
    job_service: JobService = Depends(get_job_service),
) -> CancelJobResponse:
    """
    Request cancellation of a running job.

    The job stops at its next checkpoint and ends failed with kind "cancelled".
    cancelled is false when the job had already finished.
    """
    return CancelJobResponse(job_identifier=job_id, cancelled=job_service.cancel(job_id))


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_job_errors
async def delete_job(
    job_id: str,
    job_service: JobService = Depends(get_job_service),
) -> Response:
    """Forget a finished job. Returns 409 while the job is still active."""
    job_service.remove(job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
