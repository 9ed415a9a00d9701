"""
File service orchestrator.

Preview, open, edit and save actions for markdown files on the drive.

Dependencies: markdown_file_handler.boundary
System role: File handler action orchestration
"""

import logging

from markdown_file_handler.boundary.auth.credentials import CredentialProvider
from markdown_file_handler.boundary.graph.graph_client import MARKDOWN_CONTENT_TYPE, GraphClient
from markdown_file_handler.boundary.graph.url_helpers import get_resource_from_url
from markdown_file_handler.core.exceptions import FileHandlerError
from markdown_file_handler.models.file_handler import (
    ActivationParameters,
    FileAccess,
    MarkdownFileModel,
    SaveResults,
)

logger = logging.getLogger(__name__)

MISSING_READ_PARAMETERS = "Required parameters are missing. Cannot read the source file."
MISSING_WRITE_PARAMETERS = "Required parameters are missing. Cannot write the source file."
MISSING_ACTIVATION_PARAMETERS = "Missing activation parameters."


def _decode(content: bytes) -> str:
    return content.decode("utf-8-sig", errors="replace")


class FileService:
    """Reads markdown files for display and writes edited content back."""

    def __init__(self, client: GraphClient) -> None:
        self.client = client

    def get_file_model(
        self,
        parameters: ActivationParameters,
        credentials: CredentialProvider,
        access: FileAccess,
    ) -> MarkdownFileModel:
        """
        Load a file for the requested access mode.

        Failures are reported on the returned model instead of raised.
        """
        allowed = parameters.can_read if access is FileAccess.READ else parameters.can_write
        if not allowed:
            message = MISSING_READ_PARAMETERS if access is FileAccess.READ else MISSING_WRITE_PARAMETERS
            return MarkdownFileModel.error_model(parameters, message)

        read_only = access is FileAccess.READ
        try:
            if parameters.item_url:
                resource = get_resource_from_url(parameters.item_url)
                token = credentials.get_access_token(resource)
                data = self.client.get_stream_content_for_item_url(parameters.item_url, token)
                return MarkdownFileModel.writeable_model(
                    parameters, data.filename, _decode(data.content), read_only=read_only
                )

            token = credentials.get_access_token(parameters.resource_id)
            content = self.client.download_bytes(parameters.file_get, token)
            return MarkdownFileModel.writeable_model(
                parameters, parameters.file_name or "", _decode(content), read_only=read_only
            )
        except (FileHandlerError, ValueError) as exc:
            logger.warning("Could not load file for %s: %s", access.value, exc)
            return MarkdownFileModel.error_model(parameters, exc)

    def save_changes(
        self,
        parameters: ActivationParameters | None,
        credentials: CredentialProvider,
    ) -> SaveResults:
        """Upload edited markdown content to the activated item."""
        if parameters is None or not parameters.can_write:
            return SaveResults(success=False, error=MISSING_ACTIVATION_PARAMETERS)
        if parameters.file_content is None:
            return SaveResults(success=False, error="No file content to save.")

        data = parameters.file_content.encode("utf-8")
        try:
            if parameters.item_url:
                token = credentials.get_access_token(get_resource_from_url(parameters.item_url))
                success = self.client.upload_file_contents(data, parameters.item_url, token)
            else:
                token = credentials.get_access_token(parameters.resource_id)
                self.client.put_bytes(data, parameters.file_put, token, MARKDOWN_CONTENT_TYPE)
                success = True
        except (FileHandlerError, ValueError) as exc:
            logger.warning("Save failed: %s", exc)
            message = exc.message if isinstance(exc, FileHandlerError) else str(exc)
            return SaveResults(success=False, error=message)
        return SaveResults(success=success)
