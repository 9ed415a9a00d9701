"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived objects (tracker,
runner, drive client) are owned by a ServiceCache stored on app.state, so each
application instance (and each test app) gets its own job registry.

Dependencies: markdown_file_handler.configs, markdown_file_handler.application,
    markdown_file_handler.boundary
System role: DI container for service injection
"""

import logging

from fastapi import Depends, Request, Response

from markdown_file_handler.application.services import FileService, JobService
from markdown_file_handler.boundary.auth.credentials import (
    RequestCredentialProvider,
    StaticCredentialProvider,
)
from markdown_file_handler.boundary.graph.graph_client import GraphClient
from markdown_file_handler.configs import Settings, get_settings
from markdown_file_handler.core.job_runner import JobRunner
from markdown_file_handler.core.job_tracker import JobTracker
from markdown_file_handler.models.file_handler import ActivationParameters

logger = logging.getLogger(__name__)

ACTIVATION_COOKIE = "activation_parameters"


class ServiceCache:
    """Container for the application's long-lived service instances."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._tracker: JobTracker | None = None
        self._runner: JobRunner | None = None
        self._graph_client: GraphClient | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def tracker(self) -> JobTracker:
        """Get cached job tracker."""
        if self._tracker is None:
            self._tracker = JobTracker()
        return self._tracker

    @property
    def runner(self) -> JobRunner:
        """Get cached job runner."""
        if self._runner is None:
            self._runner = JobRunner(
                self.tracker,
                max_workers=self._settings.jobs.max_workers,
            )
        return self._runner

    @property
    def graph_client(self) -> GraphClient:
        """Get cached drive API client."""
        if self._graph_client is None:
            self._graph_client = GraphClient(
                timeout=self._settings.graph.request_timeout_seconds,
            )
        return self._graph_client

    def clear(self) -> None:
        """Shut down the runner and close the drive client."""
        if self._runner is not None:
            self._runner.shutdown(wait=True)
        if self._graph_client is not None:
            self._graph_client.close()
        self._tracker = None
        self._runner = None
        self._graph_client = None


def get_service_cache(request: Request) -> ServiceCache:
    """Get the service cache owned by the running application."""
    return request.app.state.services


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_job_service(cache: ServiceCache = Depends(get_service_cache)) -> JobService:
    """
    Get job service instance.

    Args:
        cache: Application service cache (injected via Depends)

    Returns:
        JobService: Job service bound to the application's runner and tracker
    """
    return JobService(
        runner=cache.runner,
        tracker=cache.tracker,
        content_client=cache.graph_client,
        zip_archive_name=cache.settings.jobs.zip_archive_name,
    )


def get_file_service(cache: ServiceCache = Depends(get_service_cache)) -> FileService:
    """Get file service instance."""
    return FileService(client=cache.graph_client)


def get_credential_provider(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> RequestCredentialProvider:
    """
    Get credential provider for the current request.

    Uses the bearer Authorization header, falling back to the configured
    static token when one is set.
    """
    fallback = None
    if settings.graph.static_access_token:
        fallback = StaticCredentialProvider(settings.graph.static_access_token)
    return RequestCredentialProvider(
        authorization=request.headers.get("Authorization"),
        fallback=fallback,
    )


async def get_activation_parameters(request: Request, response: Response) -> ActivationParameters:
    """
    Parse activation parameters from the posted form.

    If the request carries no form data it is the return leg of a sign-in
    redirect, so the parameters saved in the activation cookie are used and
    the cookie is cleared.
    """
    form = await request.form()
    if form and len(form.keys()) > 0:
        return ActivationParameters.from_form(form)

    cookie = request.cookies.get(ACTIVATION_COOKIE)
    if cookie is not None:
        response.delete_cookie(ACTIVATION_COOKIE)
    return ActivationParameters.from_cookie(cookie)
