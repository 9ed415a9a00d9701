"""
Credential providers.

Supply the access token a request acts with. Token acquisition (sign-in
redirects, refresh) happens upstream; these providers only pick up a token
that is already there.

Dependencies: markdown_file_handler.boundary.graph.url_helpers
System role: Credential source for drive API calls
"""

from collections.abc import Sequence
from typing import Protocol

from markdown_file_handler.boundary.graph.url_helpers import parse_access_token
from markdown_file_handler.core.exceptions import AuthError


class CredentialProvider(Protocol):
    """Source of access tokens for a drive resource."""

    def get_access_token(self, resource_id: str) -> str:
        """
        Return an access token for resource_id.

        Raises:
            AuthError: If no token can be obtained
        """
        ...


class StaticCredentialProvider:
    """Returns a single configured token for every resource (development use)."""

    def __init__(self, access_token: str | None) -> None:
        self._access_token = access_token

    def get_access_token(self, resource_id: str) -> str:
        if not self._access_token:
            raise AuthError("No static access token configured", resource_id=resource_id)
        return self._access_token


class RequestCredentialProvider:
    """
    Token from the current request.

    Looks at the bearer Authorization header first, then an access_token query
    parameter on any of the activation item URLs, then the fallback provider.
    """

    def __init__(
        self,
        authorization: str | None = None,
        source_urls: Sequence[str] = (),
        fallback: CredentialProvider | None = None,
    ) -> None:
        self._authorization = authorization
        self._source_urls = tuple(source_urls)
        self._fallback = fallback

    def with_source_urls(self, source_urls: Sequence[str]) -> "RequestCredentialProvider":
        return RequestCredentialProvider(self._authorization, source_urls, self._fallback)

    def get_access_token(self, resource_id: str) -> str:
        if self._authorization:
            scheme, _, token = self._authorization.partition(" ")
            if scheme.lower() == "bearer" and token.strip():
                return token.strip()
        for url in self._source_urls:
            token = parse_access_token(url)
            if token:
                return token
        if self._fallback is not None:
            return self._fallback.get_access_token(resource_id)
        raise AuthError("No access token available for request", resource_id=resource_id)
