"""
Data Sanitization Module

Masks API keys in headers and query strings so request logs never carry them in plain text.
"""

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

SENSITIVE_HEADERS = {"authorization", "x-api-key", "api-key", "x-goog-api-key"}
SENSITIVE_QUERY_PARAMS = {"key", "api_key"}


def sanitize_secret(value: str) -> str:
    """
    Mask a secret value, keeping a prefix and some characters for identification.

    Examples:
        >>> sanitize_secret("Bearer sk-1234567890abcdef")
        'Bearer sk-1***...***ef'
        >>> sanitize_secret("short")
        '***'
    """
    if not value:
        return value

    prefix = ""
    token = value
    if value.lower().startswith("bearer "):
        prefix = "Bearer "
        token = value[7:]

    if len(token) <= 8:
        return f"{prefix}***"

    return f"{prefix}{token[:4]}***...***{token[-2:]}"


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of the headers with credential fields masked"""
    if not headers:
        return {}

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and isinstance(value, str):
            sanitized[key] = sanitize_secret(value)
        else:
            sanitized[key] = value
    return sanitized


def sanitize_url(url: str) -> str:
    """
    Mask credential query parameters in a URL.

    Examples:
        >>> sanitize_url("https://host/path?key=abcdefghijkl&alt=sse")
        'https://host/path?key=abcd%2A%2A%2A...%2A%2A%2Akl&alt=sse'
    """
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (name, sanitize_secret(value) if name.lower() in SENSITIVE_QUERY_PARAMS else value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))
