"""
Background job configuration settings.

Settings for the job runner worker pool and job variant defaults.

Dependencies: pydantic_settings
System role: Job execution configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JobSettings(BaseSettings):
    """Job runner configuration."""

    model_config = SettingsConfigDict(
        env_prefix="JOBS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_workers: int = Field(
        default=4,
        ge=1,
        description="Number of worker threads executing background jobs",
    )
    zip_archive_name: str = Field(
        default="Archive.zip",
        description="File name used for archives created by the compression job",
    )
