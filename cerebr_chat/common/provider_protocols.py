"""
Provider profile resolution.

Picks the wire dialect from an explicit override or from the base URL.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ProviderProfile(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"


PROVIDER_PROFILES = tuple(profile.value for profile in ProviderProfile)

# Checked in order; the first profile with a matching substring wins
URL_MARKERS: tuple[tuple[ProviderProfile, tuple[str, ...]], ...] = (
    (
        ProviderProfile.GEMINI,
        ("generativelanguage.googleapis.com", "aiplatform.googleapis.com", "gemini"),
    ),
    (
        ProviderProfile.CLAUDE,
        ("anthropic.com", "claude", "api.anthropic"),
    ),
)


def resolve_provider_profile(
    base_url: Optional[str], explicit_format: Optional[str] = None
) -> ProviderProfile:
    """
    Resolve the provider profile for a call.

    An explicit format that names a known profile always wins. Otherwise the
    lower-cased URL is matched against known host markers, defaulting to openai.
    """
    if explicit_format in PROVIDER_PROFILES:
        return ProviderProfile(explicit_format)

    url = (base_url or "").lower()
    for profile, markers in URL_MARKERS:
        if any(marker in url for marker in markers):
            return profile
    return ProviderProfile.OPENAI
