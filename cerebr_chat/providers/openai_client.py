"""
OpenAI 协议客户端

OpenAI 兼容的 /v1/chat/completions 流式请求：消息原样透传，
增量从 choices[0].delta 中读取 content 与 reasoning_content。
"""

import logging
from typing import Any

from cerebr_chat.common.provider_protocols import ProviderProfile
from cerebr_chat.domain.chat import APIConfig, Message
from cerebr_chat.providers.base import PreparedRequest, ProviderClient, StreamDelta

logger = logging.getLogger(__name__)


class OpenAIClient(ProviderClient):
    """
    OpenAI 协议客户端

    也用于所有 OpenAI 兼容的供应商（DeepSeek、Moonshot、本地推理服务等）。
    """

    profile = ProviderProfile.OPENAI

    def convert_messages(self, messages: list[Message]) -> dict[str, Any]:
        """消息不做转换，直接透传"""
        return {"messages": [msg.to_payload() for msg in messages]}

    def build_request(
        self, url: str, api_config: APIConfig, messages: list[Message]
    ) -> PreparedRequest:
        body = {
            "model": api_config.model_name or self.settings.DEFAULT_OPENAI_MODEL,
            **self.convert_messages(messages),
            "stream": True,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_config.api_key}",
        }
        return PreparedRequest(url=url, headers=headers, body=body)

    def extract_delta(self, record: Any) -> StreamDelta:
        if not isinstance(record, dict):
            return StreamDelta()
        choices = record.get("choices")
        if not isinstance(choices, list) or not choices:
            return StreamDelta()

        choice = choices[0]
        if not isinstance(choice, dict):
            return StreamDelta()
        delta = choice.get("delta")
        if not isinstance(delta, dict):
            delta = {}

        content = delta.get("content")
        reasoning = delta.get("reasoning_content")
        return StreamDelta(
            content=content if isinstance(content, str) else "",
            reasoning_content=reasoning if isinstance(reasoning, str) else "",
            stop_reason=choice.get("finish_reason"),
        )
