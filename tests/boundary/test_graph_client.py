"""
Test suite for GraphClient.

Uses httpx.MockTransport to check request shape and the mapping of HTTP
and network failures onto TransferError / ExpiredCredentialError.

System role: Verification of the drive API boundary
"""

import httpx
import pytest

from markdown_file_handler.boundary.graph.graph_client import MARKDOWN_CONTENT_TYPE, GraphClient
from markdown_file_handler.core.exceptions import ErrorKind, ExpiredCredentialError, TransferError

ITEM_URL = "https://contoso.sharepoint.com/_api/v2.0/drive/items/42"


def make_client(handler) -> GraphClient:
    return GraphClient(transport=httpx.MockTransport(handler))


class TestGraphClient:
    """Test suite for GraphClient requests and error mapping."""

    def test_get_item_should_parse_drive_item(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "id": "42",
                    "name": "notes.md",
                    "webUrl": "https://contoso.sharepoint.com/notes.md",
                    "size": 12,
                    "parentReference": {"driveId": "d1", "id": "p1", "path": "/drive/root:"},
                },
            )

        with make_client(handler) as client:
            item = client.get_item(ITEM_URL, "tok")

        assert item.name == "notes.md"
        assert item.web_url == "https://contoso.sharepoint.com/notes.md"
        assert item.parent_reference.drive_id == "d1"
        assert seen[0].headers["Authorization"] == "Bearer tok"

    def test_401_should_raise_expired_credential(self) -> None:
        with make_client(lambda request: httpx.Response(401)) as client:
            with pytest.raises(ExpiredCredentialError) as exc_info:
                client.download_bytes(ITEM_URL + "/content", "stale")

        assert exc_info.value.status_code == 401
        assert exc_info.value.kind is ErrorKind.EXPIRED_CREDENTIAL
        assert "401" in exc_info.value.message

    def test_server_error_should_raise_transfer_error(self) -> None:
        with make_client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(TransferError) as exc_info:
                client.upload_bytes(b"data", ITEM_URL + ":/a.zip:/content", "tok")

        assert not isinstance(exc_info.value, ExpiredCredentialError)
        assert exc_info.value.status_code == 503
        assert exc_info.value.kind is ErrorKind.TRANSFER

    def test_network_error_should_raise_transfer_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(TransferError) as exc_info:
                client.get_item(ITEM_URL, "tok")

        assert exc_info.value.status_code is None
        assert "ConnectError" in exc_info.value.message

    def test_invalid_item_payload_should_raise_transfer_error(self) -> None:
        with make_client(lambda request: httpx.Response(200, text="not json")) as client:
            with pytest.raises(TransferError, match="Unexpected item payload"):
                client.get_item(ITEM_URL, "tok")

    def test_error_messages_should_not_leak_tokens(self) -> None:
        with make_client(lambda request: httpx.Response(500)) as client:
            with pytest.raises(TransferError) as exc_info:
                client.download_bytes(ITEM_URL + "/content?access_token=secret-value", "tok")

        assert "secret-value" not in exc_info.value.message

    def test_upload_file_contents_should_put_markdown(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "42", "name": "notes.md"})

        with make_client(handler) as client:
            assert client.upload_file_contents(b"# Title", ITEM_URL, "tok") is True

        request = seen[0]
        assert request.method == "PUT"
        assert str(request.url) == ITEM_URL + "/content"
        assert request.headers["Content-Type"] == MARKDOWN_CONTENT_TYPE
        assert request.content == b"# Title"

    def test_get_stream_content_should_return_name_and_bytes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/content"):
                return httpx.Response(200, content=b"# Hello")
            return httpx.Response(200, json={"id": "42", "name": "hello.md"})

        with make_client(handler) as client:
            data = client.get_stream_content_for_item_url(ITEM_URL, "tok")

        assert data.filename == "hello.md"
        assert data.content == b"# Hello"
