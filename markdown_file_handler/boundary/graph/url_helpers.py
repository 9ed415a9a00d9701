"""
Drive API URL helpers.

Parse activation URLs and build drive API URLs for items and uploads.

Dependencies: urllib.parse
System role: URL construction for drive API calls
"""

from urllib.parse import parse_qs, quote, urlencode, urlsplit, urlunsplit


def parse_access_token(source_url: str) -> str | None:
    """
    Return the access token carried in a URL's query string, if any.

    Args:
        source_url: Drive API URL, possibly with ?access_token=...

    Returns:
        str | None: Token value or None
    """
    values = parse_qs(urlsplit(source_url).query).get("access_token")
    return values[0] if values else None


def parse_base_url(source_url: str) -> str:
    """
    Trim a drive API URL at /drive to get the base URL for other API calls.

    Raises:
        ValueError: If the URL has no /drive segment
    """
    trim_point = source_url.find("/drive")
    if trim_point < 0:
        raise ValueError(f"Not a drive API URL: {source_url}")
    return source_url[:trim_point]


def build_child_upload_url(base_url: str, drive_id: str, parent_id: str, filename: str) -> str:
    """URL that creates or replaces ``filename`` inside folder ``parent_id``."""
    return f"{base_url}/drives/{drive_id}/items/{parent_id}:/{quote(filename)}:/content"


def get_resource_from_url(url: str) -> str:
    """
    Return the resource (scheme and host) a token must be requested for.

    Raises:
        ValueError: If the URL is not absolute
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Not an absolute URL: {url}")
    return f"{parts.scheme}://{parts.netloc}"


def append_path(url: str, segment: str, query: dict[str, str] | None = None) -> str:
    """
    Append a path segment to a URL, keeping (and optionally extending) its query.

    Args:
        url: Base URL
        segment: Path segment, e.g. "content"
        query: Extra query parameters

    Returns:
        str: New URL
    """
    parts = urlsplit(url)
    path = parts.path.rstrip("/") + "/" + segment.lstrip("/")
    query_string = parts.query
    if query:
        extra = urlencode(query)
        query_string = f"{query_string}&{extra}" if query_string else extra
    return urlunsplit((parts.scheme, parts.netloc, path, query_string, parts.fragment))
