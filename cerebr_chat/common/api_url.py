"""
Chat Completions URL Normalization

Turns whatever base URL the user configured into a canonical chat-completions endpoint.
"""

import re
from typing import Callable, Optional
from urllib.parse import urlsplit, urlunsplit

# Paths that already name a concrete endpoint and must not be extended
EXPLICIT_ENDPOINT_PATTERN = re.compile(
    r"(/chat/completions|/messages|:generateContent|:streamGenerateContent)$"
)

UrlNormalizer = Callable[[Optional[str]], str]


def normalize_chat_completions_url(base_url: Optional[str]) -> str:
    """
    Normalize a configured base URL

    Examples:
        >>> normalize_chat_completions_url("https://api.openai.com")
        'https://api.openai.com/v1/chat/completions'
        >>> normalize_chat_completions_url("https://api.openai.com/v1/")
        'https://api.openai.com/v1/chat/completions'
        >>> normalize_chat_completions_url("https://api.anthropic.com/v1/messages")
        'https://api.anthropic.com/v1/messages'

    Returns:
        str: Canonical URL, or an empty string when nothing usable was given
    """
    if not base_url or not base_url.strip():
        return ""

    parts = urlsplit(base_url.strip())
    path = parts.path.rstrip("/")

    # A /models/ path is a Gemini model URL; the composer finishes it
    if not EXPLICIT_ENDPOINT_PATTERN.search(path) and "/models/" not in path:
        path = f"{path}/chat/completions" if path else "/v1/chat/completions"

    return urlunsplit(parts._replace(path=path))
