"""
Provider Client Factory Module

Maps a provider profile to the client implementing its dialect.
"""

from typing import Optional

import httpx

from cerebr_chat.common.i18n import Translator
from cerebr_chat.common.provider_protocols import ProviderProfile
from cerebr_chat.config import Settings
from cerebr_chat.providers.base import ProviderClient
from cerebr_chat.providers.claude_client import ClaudeClient
from cerebr_chat.providers.gemini_client import GeminiClient
from cerebr_chat.providers.openai_client import OpenAIClient

PROVIDER_CLIENTS: dict[ProviderProfile, type[ProviderClient]] = {
    ProviderProfile.OPENAI: OpenAIClient,
    ProviderProfile.GEMINI: GeminiClient,
    ProviderProfile.CLAUDE: ClaudeClient,
}


def get_provider_client(
    profile: ProviderProfile,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    translator: Optional[Translator] = None,
) -> ProviderClient:
    """
    Create the client for the given profile

    A new instance is built per call so the injected transport and settings
    never leak between calls.

    Args:
        profile: Resolved provider profile
        settings: Adapter settings
        transport: Optional httpx transport
        translator: Localized string lookup

    Returns:
        ProviderClient: Client instance

    Raises:
        ValueError: Unsupported profile
    """
    client_cls = PROVIDER_CLIENTS.get(ProviderProfile(profile))
    if client_cls is None:
        raise ValueError(f"Unsupported provider profile: {profile}")
    return client_cls(settings=settings, transport=transport, translator=translator)
