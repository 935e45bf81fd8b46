"""
Provider Factory Unit Tests
"""

import pytest

from cerebr_chat.common.provider_protocols import ProviderProfile
from cerebr_chat.providers import (
    ClaudeClient,
    GeminiClient,
    MultimodalProviderClient,
    OpenAIClient,
    get_provider_client,
)


@pytest.mark.parametrize(
    "profile, client_cls",
    [
        (ProviderProfile.OPENAI, OpenAIClient),
        (ProviderProfile.GEMINI, GeminiClient),
        (ProviderProfile.CLAUDE, ClaudeClient),
        ("claude", ClaudeClient),
    ],
)
def test_get_provider_client(profile, client_cls):
    client = get_provider_client(profile)
    assert isinstance(client, client_cls)
    assert client.profile == ProviderProfile(profile)


def test_get_provider_client_returns_fresh_instances():
    assert get_provider_client(ProviderProfile.OPENAI) is not get_provider_client(ProviderProfile.OPENAI)


def test_get_provider_client_rejects_unknown_profile():
    with pytest.raises(ValueError):
        get_provider_client("anthropic")


def test_multimodal_clients_share_part_conversion():
    assert issubclass(GeminiClient, MultimodalProviderClient)
    assert issubclass(ClaudeClient, MultimodalProviderClient)
    assert not issubclass(OpenAIClient, MultimodalProviderClient)


def test_multimodal_client_requires_image_part(settings):
    class TextOnlyClient(MultimodalProviderClient):
        profile = ProviderProfile.GEMINI

        def convert_messages(self, messages):
            return {}

        def build_request(self, url, api_config, messages):
            raise AssertionError("not called")

        def extract_delta(self, record):
            raise AssertionError("not called")

    with pytest.raises(TypeError):
        TextOnlyClient(settings=settings)
