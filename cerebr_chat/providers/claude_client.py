"""
Claude (Anthropic Messages) Client

Translates messages into the Messages API shape and decodes its SSE event stream.
"""

import logging
import re
from typing import Any

from cerebr_chat.common.provider_protocols import ProviderProfile
from cerebr_chat.domain.chat import APIConfig, Message
from cerebr_chat.providers.base import (
    MultimodalProviderClient,
    PreparedRequest,
    StreamDelta,
    system_text,
)

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_SUFFIX = re.compile(r"/v1/chat/completions/?$")


class ClaudeClient(MultimodalProviderClient):
    """
    Claude Messages API client

    Authenticates with ``x-api-key`` instead of a bearer token.
    """

    profile = ProviderProfile.CLAUDE

    def _image_part(self, mime_type: str, data: str) -> dict[str, Any]:
        return {
            "type": "image",
            "source": {"type": "base64", "media_type": mime_type, "data": data},
        }

    def convert_messages(self, messages: list[Message]) -> dict[str, Any]:
        """
        Build ``messages`` and ``system``

        Non-empty system messages are joined with blank lines in encounter order. Other
        messages keep their role; those left without content blocks are dropped.
        """
        system, turns = self._split_system(messages)

        claude_messages = []
        for msg in turns:
            content = self._convert_content(msg)
            if content:
                claude_messages.append({"role": msg.role, "content": content})

        return {
            "messages": claude_messages,
            "system": "\n\n".join(text for text in map(system_text, system) if text),
        }

    @staticmethod
    def build_url(url: str) -> str:
        if "/messages" in url:
            return url
        return CHAT_COMPLETIONS_SUFFIX.sub("/v1/messages", url)

    def build_request(
        self, url: str, api_config: APIConfig, messages: list[Message]
    ) -> PreparedRequest:
        converted = self.convert_messages(messages)

        body: dict[str, Any] = {
            "model": api_config.model_name or self.settings.DEFAULT_CLAUDE_MODEL,
            "messages": converted["messages"],
        }
        if converted["system"]:
            body["system"] = converted["system"]
        body["max_tokens"] = self.settings.MAX_OUTPUT_TOKENS
        body["stream"] = True

        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_config.api_key or "",
            "anthropic-version": self.settings.ANTHROPIC_VERSION,
            "anthropic-dangerous-direct-browser-access": "true",
        }
        return PreparedRequest(url=self.build_url(url), headers=headers, body=body)

    def extract_delta(self, record: Any) -> StreamDelta:
        if not isinstance(record, dict):
            return StreamDelta()
        event_type = record.get("type")
        delta = record.get("delta")
        if not isinstance(delta, dict):
            return StreamDelta()

        if event_type == "content_block_delta":
            text = delta.get("text")
            return StreamDelta(content=text if isinstance(text, str) else "")
        if event_type == "message_delta" and delta.get("stop_reason"):
            return StreamDelta(stop_reason=delta["stop_reason"])
        return StreamDelta()
