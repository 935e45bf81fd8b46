"""
Google Gemini Native API Client

Translates messages into ``contents`` / ``systemInstruction`` and targets the
``:streamGenerateContent`` endpoint in SSE mode.
"""

import logging
import re
from typing import Any, Optional

import httpx

from cerebr_chat.common.provider_protocols import ProviderProfile
from cerebr_chat.domain.chat import APIConfig, Message, ROLE_ASSISTANT
from cerebr_chat.providers.base import (
    MultimodalProviderClient,
    PreparedRequest,
    StreamDelta,
    system_text,
)

logger = logging.getLogger(__name__)

# Optional version segment in front of the chat-completions path
CHAT_COMPLETIONS_SUFFIX = re.compile(r"(/v1(beta)?)?/chat/completions/?$")
GENERATE_MARKERS = (":streamGenerateContent", ":generateContent")


class GeminiClient(MultimodalProviderClient):
    """Google Gemini native API client."""

    profile = ProviderProfile.GEMINI

    def _text_part(self, text: str) -> dict[str, Any]:
        return {"text": text}

    def _image_part(self, mime_type: str, data: str) -> dict[str, Any]:
        return {"inline_data": {"mime_type": mime_type, "data": data}}

    def convert_messages(self, messages: list[Message]) -> dict[str, Any]:
        """
        Build ``contents`` and ``systemInstruction``

        System messages leave the turn sequence; if several are present the last
        one is used. ``assistant`` becomes ``model``, every other role ``user``.
        Turns without any part are dropped.
        """
        system, turns = self._split_system(messages)

        contents = []
        for msg in turns:
            parts = self._convert_content(msg)
            if not parts:
                continue
            role = "model" if msg.role == ROLE_ASSISTANT else "user"
            contents.append({"role": role, "parts": parts})

        system_instruction: Optional[dict[str, Any]] = None
        if system:
            system_instruction = {"parts": [{"text": system_text(system[-1])}]}

        return {"contents": contents, "systemInstruction": system_instruction}

    def build_url(self, url: str, model_name: str, api_key: Optional[str]) -> str:
        """
        Rewrite a chat-completions URL into a streamGenerateContent URL

        Examples:
            https://generativelanguage.googleapis.com/v1/chat/completions
            -> https://generativelanguage.googleapis.com/v1beta/models/{model}:streamGenerateContent?key=...&alt=sse
        """
        if not any(marker in url for marker in GENERATE_MARKERS):
            url = CHAT_COMPLETIONS_SUFFIX.sub("", url).rstrip("/")
            if "/models/" not in url:
                url = f"{url}/v1beta/models/{model_name}:streamGenerateContent"
            else:
                url = f"{url}:streamGenerateContent"

        return str(
            httpx.URL(url)
            .copy_set_param("key", api_key or "")
            .copy_set_param("alt", "sse")
        )

    def build_request(
        self, url: str, api_config: APIConfig, messages: list[Message]
    ) -> PreparedRequest:
        model_name = api_config.model_name or self.settings.DEFAULT_GEMINI_MODEL
        converted = self.convert_messages(messages)

        body: dict[str, Any] = {"contents": converted["contents"]}
        if converted["systemInstruction"]:
            body["systemInstruction"] = converted["systemInstruction"]
        body["generationConfig"] = {
            "temperature": self.settings.GEMINI_TEMPERATURE,
            "maxOutputTokens": self.settings.MAX_OUTPUT_TOKENS,
        }

        # The key travels as a query parameter, there is no bearer header
        headers = {"Content-Type": "application/json"}
        return PreparedRequest(
            url=self.build_url(url, model_name, api_config.api_key),
            headers=headers,
            body=body,
        )

    def extract_delta(self, record: Any) -> StreamDelta:
        if not isinstance(record, dict):
            return StreamDelta()
        candidates = record.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return StreamDelta()
        candidate = candidates[0]
        if not isinstance(candidate, dict):
            return StreamDelta()

        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        texts = []
        if isinstance(parts, list):
            for part in parts:
                text = part.get("text") if isinstance(part, dict) else None
                if isinstance(text, str) and text:
                    texts.append(text)

        return StreamDelta(content="".join(texts), stop_reason=candidate.get("finishReason"))
