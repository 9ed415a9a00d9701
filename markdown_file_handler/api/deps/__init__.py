"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ACTIVATION_COOKIE,
    ServiceCache,
    get_activation_parameters,
    get_credential_provider,
    get_file_service,
    get_job_service,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "ACTIVATION_COOKIE",
    "ServiceCache",
    "get_activation_parameters",
    "get_credential_provider",
    "get_file_service",
    "get_job_service",
    "get_service_cache",
    "get_settings_dependency",
]
