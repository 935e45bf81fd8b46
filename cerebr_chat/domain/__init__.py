"""
Domain model module initialization
"""

from cerebr_chat.domain.chat import (
    AccumulatedMessage,
    AdvancedSettings,
    APIConfig,
    CallOptions,
    ChatParams,
    ContentPart,
    ImageContentPart,
    ImageURL,
    Message,
    OtherContentPart,
    TextContentPart,
    WebpageInfo,
    WebpagePage,
)

__all__ = [
    "AccumulatedMessage",
    "AdvancedSettings",
    "APIConfig",
    "CallOptions",
    "ChatParams",
    "ContentPart",
    "ImageContentPart",
    "ImageURL",
    "Message",
    "OtherContentPart",
    "TextContentPart",
    "WebpageInfo",
    "WebpagePage",
]
