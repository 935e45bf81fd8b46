"""
Localized String Lookup

Built-in catalog for the few user-facing strings the adapter produces.
"""

from typing import Callable, Optional

DEFAULT_LANGUAGE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "error_api_config_incomplete": "API configuration is incomplete, please check the base URL and API key",
        "error_response_unreadable": "Unable to read the response stream",
        "webpage_prefix_current": "Current webpage",
        "webpage_prefix_other": "Other open webpage",
        "webpage_title_label": "Title",
        "webpage_url_label": "URL",
        "webpage_content_label": "Content",
    },
    "zh-CN": {
        "error_api_config_incomplete": "API 配置不完整，请检查基础 URL 和 API 密钥",
        "error_response_unreadable": "无法读取响应流",
        "webpage_prefix_current": "当前网页",
        "webpage_prefix_other": "其他打开的网页",
        "webpage_title_label": "标题",
        "webpage_url_label": "URL",
        "webpage_content_label": "内容",
    },
}

# Signature of an injectable lookup: key -> localized string
Translator = Callable[[str], str]


def translate(key: str, language: Optional[str] = None) -> str:
    """
    Look up a localized string.

    Falls back to the base language tag (``zh-TW`` -> ``zh``), then English,
    then the key itself.
    """
    candidates = []
    if language:
        candidates.append(language)
        base = language.split("-")[0]
        candidates.extend(tag for tag in MESSAGES if tag.split("-")[0] == base)
    candidates.append(DEFAULT_LANGUAGE)

    for tag in candidates:
        catalog = MESSAGES.get(tag)
        if catalog and key in catalog:
            return catalog[key]
    return key
