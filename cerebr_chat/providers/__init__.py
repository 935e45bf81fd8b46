"""
Upstream provider client module initialization
"""

from cerebr_chat.providers.base import (
    MultimodalProviderClient,
    PreparedRequest,
    ProviderClient,
    StreamDelta,
    StreamReader,
)
from cerebr_chat.providers.claude_client import ClaudeClient
from cerebr_chat.providers.factory import get_provider_client
from cerebr_chat.providers.gemini_client import GeminiClient
from cerebr_chat.providers.openai_client import OpenAIClient

__all__ = [
    "MultimodalProviderClient",
    "PreparedRequest",
    "ProviderClient",
    "StreamDelta",
    "StreamReader",
    "OpenAIClient",
    "GeminiClient",
    "ClaudeClient",
    "get_provider_client",
]
