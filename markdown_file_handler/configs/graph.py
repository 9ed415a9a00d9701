"""
Drive API configuration settings.

Settings for the OneDrive / SharePoint REST client and development credentials.

Dependencies: pydantic_settings
System role: Remote storage client configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GraphSettings(BaseSettings):
    """Drive REST client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every drive API request",
    )
    static_access_token: str | None = Field(
        default=None,
        description="Access token used when a request carries none (development only)",
    )
