"""
Gemini Client Unit Tests
"""

import httpx
import pytest

from cerebr_chat.domain.chat import APIConfig, Message
from cerebr_chat.providers.gemini_client import GeminiClient

PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


def test_gemini_system_message_becomes_system_instruction(settings):
    client = GeminiClient(settings=settings)
    converted = client.convert_messages(
        [
            Message(role="system", content="Be terse"),
            Message(role="user", content="hi"),
            Message(role="assistant", content="hello"),
            Message(role="user", content="again"),
        ]
    )
    assert converted["systemInstruction"] == {"parts": [{"text": "Be terse"}]}
    assert converted["contents"] == [
        {"role": "user", "parts": [{"text": "hi"}]},
        {"role": "model", "parts": [{"text": "hello"}]},
        {"role": "user", "parts": [{"text": "again"}]},
    ]


def test_gemini_without_system_message(settings):
    converted = GeminiClient(settings=settings).convert_messages([Message(role="user", content="hi")])
    assert converted["systemInstruction"] is None


def test_gemini_inline_image_parts(settings):
    client = GeminiClient(settings=settings)
    converted = client.convert_messages(
        [
            Message(
                role="user",
                content=[
                    {"type": "text", "text": "describe"},
                    {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,/9j/4AAQ"}},
                    {"type": "image_url", "image_url": {"url": "data:;base64,AAAA"}},
                ],
            )
        ]
    )
    assert converted["contents"][0]["parts"] == [
        {"text": "describe"},
        {"inline_data": {"mime_type": "image/jpeg", "data": "/9j/4AAQ"}},
        {"inline_data": {"mime_type": "image/png", "data": "AAAA"}},
    ]


def test_gemini_remote_images_are_skipped_and_empty_turns_dropped(settings):
    client = GeminiClient(settings=settings)
    converted = client.convert_messages(
        [
            Message(
                role="user",
                content=[{"type": "image_url", "image_url": {"url": "https://example.com/cat.png"}}],
            ),
            Message(role="user", content=[]),
            Message(role="user", content=[{"type": "input_audio", "input_audio": {"data": "x"}}]),
            Message(role="user", content="kept"),
        ]
    )
    assert converted["contents"] == [{"role": "user", "parts": [{"text": "kept"}]}]


def test_gemini_non_string_system_content_is_serialized(settings):
    client = GeminiClient(settings=settings)
    converted = client.convert_messages(
        [Message(role="system", content=[{"type": "text", "text": "rules"}])]
    )
    text = converted["systemInstruction"]["parts"][0]["text"]
    assert text == '[{"type":"text","text":"rules"}]'


@pytest.mark.parametrize(
    "url, expected_path",
    [
        (
            "https://generativelanguage.googleapis.com/v1beta/chat/completions",
            "/v1beta/models/gemini-1.5-flash:streamGenerateContent",
        ),
        (
            "https://proxy.example.com/gemini/chat/completions",
            "/gemini/v1beta/models/gemini-1.5-flash:streamGenerateContent",
        ),
        (
            "https://generativelanguage.googleapis.com/v1/chat/completions",
            "/v1beta/models/gemini-1.5-flash:streamGenerateContent",
        ),
        (
            "https://generativelanguage.googleapis.com/v1/chat/completions/",
            "/v1beta/models/gemini-1.5-flash:streamGenerateContent",
        ),
        (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash",
            "/v1beta/models/gemini-2.0-flash:streamGenerateContent",
        ),
        (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:streamGenerateContent",
            "/v1beta/models/gemini-pro:streamGenerateContent",
        ),
        (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent",
            "/v1beta/models/gemini-pro:generateContent",
        ),
    ],
)
def test_gemini_url_rewriting(settings, url, expected_path):
    client = GeminiClient(settings=settings)
    built = httpx.URL(client.build_url(url, "gemini-1.5-flash", "AIza-key"))
    assert built.path == expected_path
    assert built.params["key"] == "AIza-key"
    assert built.params["alt"] == "sse"


def test_gemini_url_replaces_existing_key_parameter(settings):
    client = GeminiClient(settings=settings)
    built = httpx.URL(
        client.build_url(
            "https://generativelanguage.googleapis.com/v1beta/models/m:streamGenerateContent?key=old",
            "m",
            "new",
        )
    )
    assert built.params.get_list("key") == ["new"]


def test_gemini_request_shape(settings):
    client = GeminiClient(settings=settings)
    request = client.build_request(
        "https://generativelanguage.googleapis.com/v1/chat/completions",
        APIConfig(base_url="https://generativelanguage.googleapis.com", api_key="AIza-key", model_name="gemini-2.0-flash"),
        [Message(role="system", content="sys"), Message(role="user", content="hi")],
    )
    assert "Authorization" not in request.headers
    assert request.headers["Content-Type"] == "application/json"
    assert "/v1beta/models/gemini-2.0-flash:streamGenerateContent" in request.url
    assert request.body == {
        "contents": [{"role": "user", "parts": [{"text": "hi"}]}],
        "systemInstruction": {"parts": [{"text": "sys"}]},
        "generationConfig": {"temperature": 1.0, "maxOutputTokens": 8192},
    }


def test_gemini_request_omits_missing_system_instruction(settings):
    request = GeminiClient(settings=settings).build_request(
        "https://generativelanguage.googleapis.com/v1/chat/completions",
        APIConfig(base_url="x", api_key="k"),
        [Message(role="user", content="hi")],
    )
    assert "systemInstruction" not in request.body


def test_gemini_extract_text_parts(settings):
    client = GeminiClient(settings=settings)
    delta = client.parse_record(
        '{"candidates":[{"content":{"parts":[{"text":"Hel"},{"text":"lo"}],"role":"model"}}]}'
    )
    assert delta.content == "Hello"
    assert delta.reasoning_content == ""


def test_gemini_extract_ignores_non_text_parts(settings):
    client = GeminiClient(settings=settings)
    delta = client.parse_record(
        '{"candidates":[{"content":{"parts":[{"functionCall":{"name":"f"}}]},"finishReason":"STOP"}]}'
    )
    assert not delta.has_update
    assert delta.stop_reason == "STOP"


def test_gemini_extract_usage_only_record(settings):
    client = GeminiClient(settings=settings)
    assert not client.parse_record('{"usageMetadata":{"totalTokenCount":3}}').has_update
