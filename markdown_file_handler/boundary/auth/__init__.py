"""Access token providers."""

from markdown_file_handler.boundary.auth.credentials import (
    CredentialProvider,
    RequestCredentialProvider,
    StaticCredentialProvider,
)

__all__ = ["CredentialProvider", "RequestCredentialProvider", "StaticCredentialProvider"]
