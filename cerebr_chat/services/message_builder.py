"""
Message Builder

Composes the system prompt (language placeholder, webpage context) and prepares
the message list every dialect translates from.
"""

from typing import Optional

from cerebr_chat.common.i18n import Translator, translate
from cerebr_chat.domain.chat import (
    APIConfig,
    Message,
    ROLE_SYSTEM,
    WebpageInfo,
    WebpagePage,
)

WEBPAGE_SEPARATOR = "\n\n---\n"


def render_webpage(page: WebpagePage, translator: Translator = translate) -> str:
    prefix = translator(
        "webpage_prefix_current" if page.is_current else "webpage_prefix_other"
    )
    return (
        f"\n{prefix}:\n"
        f"{translator('webpage_title_label')}: {page.title}\n"
        f"{translator('webpage_url_label')}: {page.url}\n"
        f"{translator('webpage_content_label')}: {page.content}"
    )


def render_webpage_context(
    webpage_info: Optional[WebpageInfo], translator: Translator = translate
) -> str:
    """Render every page as a labeled block, blocks joined by a visible separator"""
    if webpage_info is None or not webpage_info.pages:
        return ""
    return WEBPAGE_SEPARATOR.join(
        render_webpage(page, translator) for page in webpage_info.pages
    )


def compose_system_prompt(
    api_config: APIConfig,
    user_language: str,
    webpage_info: Optional[WebpageInfo] = None,
    translator: Translator = translate,
    placeholder: str = "{{userLanguage}}",
) -> str:
    """
    Build the system prompt text

    Args:
        api_config: API configuration carrying the configured system prompt
        user_language: Language tag substituted for the placeholder
        webpage_info: Optional webpage context appended after the prompt
        translator: Localized label lookup
        placeholder: Literal placeholder to substitute

    Returns:
        str: System prompt, possibly blank
    """
    prompt = api_config.system_prompt.replace(placeholder, user_language or "")
    return prompt + render_webpage_context(webpage_info, translator)


def prepare_messages(messages: list[Message], system_prompt: str) -> list[Message]:
    """
    Strip transient fields and prepend the system message

    The system message is only added when it is not blank and the list does not
    already start with a system message.
    """
    prepared = [msg.without_transient_fields() for msg in messages]
    if system_prompt.strip() and (not prepared or prepared[0].role != ROLE_SYSTEM):
        prepared.insert(0, Message(role=ROLE_SYSTEM, content=system_prompt))
    return prepared
