"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from markdown_file_handler.configs.base import BaseSettings
from markdown_file_handler.configs.graph import GraphSettings
from markdown_file_handler.configs.jobs import JobSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    jobs: JobSettings = JobSettings()
    graph: GraphSettings = GraphSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from markdown_file_handler.configs import get_settings
        settings = get_settings()
    """
    return Settings()
