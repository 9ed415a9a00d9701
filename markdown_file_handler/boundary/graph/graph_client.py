"""
Drive REST client for item metadata, downloads and uploads.

Thin adapter over the OneDrive / SharePoint API. Every failure leaves this
module as a typed error: non-2xx responses raise TransferError carrying the
status code (401 raises ExpiredCredentialError) and network faults raise
TransferError without one.

Dependencies: httpx, markdown_file_handler.models.drive
System role: Remote content transfer primitives used by jobs and file actions
"""

import logging
from typing import Any, Protocol

import httpx

from markdown_file_handler.boundary.graph.url_helpers import append_path
from markdown_file_handler.core.exceptions import ExpiredCredentialError, TransferError
from markdown_file_handler.models.drive import DriveItem, FileData
from markdown_file_handler.observability.log_utils import redact_tokens

logger = logging.getLogger(__name__)

MARKDOWN_CONTENT_TYPE = "text/markdown; charset=utf-8"


class RemoteContentClient(Protocol):
    """Transfer primitives a job needs from the remote drive."""

    def get_item(self, item_url: str, access_token: str) -> DriveItem: ...

    def download_bytes(self, source_url: str, access_token: str) -> bytes: ...

    def upload_bytes(
        self,
        data: bytes,
        target_url: str,
        access_token: str,
        content_type: str = "application/octet-stream",
    ) -> DriveItem: ...


class GraphClient:
    """httpx-backed drive API client."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GraphClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(
        self,
        method: str,
        url: str,
        access_token: str,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {access_token}"}
        if content_type:
            headers["Content-Type"] = content_type
        try:
            response = self._client.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as exc:
            raise TransferError(
                f"{method} {redact_tokens(url)} failed: {type(exc).__name__}: {exc}",
                url=url,
            ) from exc

        if response.status_code == 401:
            raise ExpiredCredentialError(
                f"HTTP 401 Unauthorized from {method} {redact_tokens(url)}: "
                "access token was rejected or has expired",
                status_code=401,
                url=url,
            )
        if not response.is_success:
            raise TransferError(
                f"HTTP {response.status_code} from {method} {redact_tokens(url)}",
                status_code=response.status_code,
                url=url,
            )
        logger.debug("%s %s -> %s", method, redact_tokens(url), response.status_code)
        return response

    def get_item(self, item_url: str, access_token: str) -> DriveItem:
        """
        Fetch item metadata.

        Raises:
            TransferError: On non-2xx responses, network faults or invalid JSON
        """
        response = self._send("GET", item_url, access_token)
        try:
            return DriveItem.model_validate(response.json())
        except ValueError as exc:
            raise TransferError(
                f"Unexpected item payload from {redact_tokens(item_url)}",
                status_code=response.status_code,
                url=item_url,
            ) from exc

    def download_bytes(self, source_url: str, access_token: str) -> bytes:
        return self._send("GET", source_url, access_token).content

    def upload_bytes(
        self,
        data: bytes,
        target_url: str,
        access_token: str,
        content_type: str = "application/octet-stream",
    ) -> DriveItem:
        """
        PUT content to a drive upload URL.

        Returns:
            DriveItem: The created or updated item

        Raises:
            TransferError: On non-2xx responses or network faults
        """
        response = self._send("PUT", target_url, access_token, content=data, content_type=content_type)
        try:
            return DriveItem.model_validate(response.json())
        except ValueError as exc:
            raise TransferError(
                f"Unexpected upload response from {redact_tokens(target_url)}",
                status_code=response.status_code,
                url=target_url,
            ) from exc

    def get_stream_content_for_item_url(self, item_url: str, access_token: str) -> FileData:
        """Download an item's content together with its file name."""
        item = self.get_item(item_url, access_token)
        content = self.download_bytes(append_path(item_url, "content"), access_token)
        return FileData(filename=item.name, content=content)

    def put_bytes(
        self,
        data: bytes,
        target_url: str,
        access_token: str,
        content_type: str = "application/octet-stream",
    ) -> None:
        """PUT content to a URL without interpreting the response body."""
        self._send("PUT", target_url, access_token, content=data, content_type=content_type)

    def upload_file_contents(self, data: bytes, item_url: str, access_token: str) -> bool:
        """Replace an item's content in place."""
        self.put_bytes(data, append_path(item_url, "content"), access_token, MARKDOWN_CONTENT_TYPE)
        return True
