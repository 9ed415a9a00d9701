import pytest

from markdown_file_handler.boundary.auth import RequestCredentialProvider, StaticCredentialProvider
from markdown_file_handler.core.exceptions import AuthError, ErrorKind


def test_static_provider_returns_configured_token():
    assert StaticCredentialProvider("dev-token").get_access_token("https://x") == "dev-token"


def test_static_provider_without_token_raises_auth_error():
    with pytest.raises(AuthError) as exc_info:
        StaticCredentialProvider(None).get_access_token("https://x")
    assert exc_info.value.kind is ErrorKind.AUTH


def test_request_provider_prefers_bearer_header():
    provider = RequestCredentialProvider(
        "Bearer header-token",
        ["https://x/drive/items/1?access_token=url-token"],
        StaticCredentialProvider("fallback"),
    )
    assert provider.get_access_token("https://x") == "header-token"


def test_request_provider_uses_url_token_then_fallback():
    fallback = StaticCredentialProvider("fallback")
    with_url = RequestCredentialProvider(None, fallback=fallback).with_source_urls(
        ["https://x/drive/items/1", "https://x/drive/items/2?access_token=url-token"]
    )
    assert with_url.get_access_token("https://x") == "url-token"
    assert RequestCredentialProvider("Basic abc", fallback=fallback).get_access_token("https://x") == "fallback"


def test_request_provider_without_any_token_raises():
    with pytest.raises(AuthError):
        RequestCredentialProvider().get_access_token("https://x")
