"""
File handler API endpoints.

Routes: POST /filehandler/{preview,open,edit,new,save,convert-to-pdf,compress}

The drive posts activation parameters as form fields; after a sign-in redirect
they come back from the activation cookie instead.

Dependencies: markdown_file_handler.application.services, markdown_file_handler.models
System role: File handler action HTTP API
"""

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool

from markdown_file_handler.api.deps import (
    get_activation_parameters,
    get_credential_provider,
    get_file_service,
    get_job_service,
)
from markdown_file_handler.api.routers.error_handling import handle_job_errors
from markdown_file_handler.application.services import FileService, JobService
from markdown_file_handler.boundary.auth.credentials import RequestCredentialProvider
from markdown_file_handler.models.file_handler import (
    ActivationParameters,
    FileAccess,
    MarkdownFileModel,
    SaveResults,
)
from markdown_file_handler.models.job import AsyncActionModel

router = APIRouter(prefix="/filehandler", tags=["filehandler"])


async def _load(
    file_service: FileService,
    parameters: ActivationParameters,
    credentials: RequestCredentialProvider,
    access: FileAccess,
) -> MarkdownFileModel:
    return await run_in_threadpool(
        file_service.get_file_model,
        parameters,
        credentials.with_source_urls(parameters.item_urls),
        access,
    )


@router.post("/preview", response_model=MarkdownFileModel)
async def preview(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    file_service: FileService = Depends(get_file_service),
) -> MarkdownFileModel:
    """Read-only preview of the file."""
    return await _load(file_service, parameters, credentials, FileAccess.READ)


@router.post("/open", response_model=MarkdownFileModel)
async def open_file(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    file_service: FileService = Depends(get_file_service),
) -> MarkdownFileModel:
    """Open the file for reading; requires write parameters so the client can switch to edit."""
    model = await _load(file_service, parameters, credentials, FileAccess.WRITE)
    return model.model_copy(update={"read_only": True})


@router.post("/edit", response_model=MarkdownFileModel)
async def edit(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    file_service: FileService = Depends(get_file_service),
) -> MarkdownFileModel:
    """Read-write editor model of the file."""
    return await _load(file_service, parameters, credentials, FileAccess.READ_WRITE)


@router.post("/new", response_model=MarkdownFileModel)
async def new_file(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    file_service: FileService = Depends(get_file_service),
) -> MarkdownFileModel:
    """Editor model for a newly created file."""
    return await _load(file_service, parameters, credentials, FileAccess.WRITE)


@router.post("/save", response_model=SaveResults)
async def save(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    file_service: FileService = Depends(get_file_service),
) -> SaveResults:
    """Save edited content back to the drive. Failures are reported in the body."""
    return await run_in_threadpool(
        file_service.save_changes,
        parameters,
        credentials.with_source_urls(parameters.item_urls),
    )


@router.post(
    "/convert-to-pdf",
    response_model=AsyncActionModel,
    status_code=status.HTTP_202_ACCEPTED,
)
@handle_job_errors
async def convert_to_pdf(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    job_service: JobService = Depends(get_job_service),
) -> AsyncActionModel:
    """
    Start converting the activated item to PDF.

    Returns the job identifier at once; poll GET /jobs/{job_identifier}.
    """
    return job_service.convert_to_pdf(
        parameters, credentials.with_source_urls(parameters.item_urls)
    )


@router.post(
    "/compress",
    response_model=AsyncActionModel,
    status_code=status.HTTP_202_ACCEPTED,
)
@handle_job_errors
async def compress_files(
    parameters: ActivationParameters = Depends(get_activation_parameters),
    credentials: RequestCredentialProvider = Depends(get_credential_provider),
    job_service: JobService = Depends(get_job_service),
) -> AsyncActionModel:
    """
    Start compressing the activated items into a zip archive.

    Returns the job identifier at once; poll GET /jobs/{job_identifier}.
    """
    return job_service.compress_files(
        parameters, credentials.with_source_urls(parameters.item_urls)
    )
