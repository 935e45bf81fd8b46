"""
Cerebr Chat

Streaming chat-completion adapter speaking the OpenAI, Gemini and Claude wire protocols.
"""

from cerebr_chat.common.errors import (
    AppError,
    ConfigError,
    MisfiledThinkError,
    RecordParseError,
    TransportError,
)
from cerebr_chat.common.provider_protocols import ProviderProfile, resolve_provider_profile
from cerebr_chat.domain.chat import (
    AccumulatedMessage,
    APIConfig,
    CallOptions,
    ChatParams,
    Message,
    WebpageInfo,
)
from cerebr_chat.services.cancellation import CancellationToken
from cerebr_chat.services.chat_service import ChatCall, call_api

__version__ = "0.1.0"

__all__ = [
    "AppError",
    "ConfigError",
    "MisfiledThinkError",
    "RecordParseError",
    "TransportError",
    "ProviderProfile",
    "resolve_provider_profile",
    "AccumulatedMessage",
    "APIConfig",
    "CallOptions",
    "ChatParams",
    "Message",
    "WebpageInfo",
    "CancellationToken",
    "ChatCall",
    "call_api",
]
