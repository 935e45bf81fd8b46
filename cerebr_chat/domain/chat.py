"""
Chat Domain Model

Defines the provider-agnostic conversation model and the per-call parameter objects.
"""

from dataclasses import asdict, dataclass
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


class CamelModel(BaseModel):
    """Accepts both snake_case field names and the camelCase names used by the browser side"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextContentPart(BaseModel):
    """Text Content Part"""

    type: Literal["text"] = "text"
    text: str = ""


class ImageURL(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Remote URL or data URI (data:<mime>;base64,<payload>)
    url: str


class ImageContentPart(BaseModel):
    """Image Content Part"""

    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


class OtherContentPart(BaseModel):
    """Any part type the translators do not understand; kept for passthrough only"""

    model_config = ConfigDict(extra="allow")

    type: str


def _content_part_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return kind if kind in ("text", "image_url") else "other"


ContentPart = Annotated[
    Union[
        Annotated[TextContentPart, Tag("text")],
        Annotated[ImageContentPart, Tag("image_url")],
        Annotated[OtherContentPart, Tag("other")],
    ],
    Discriminator(_content_part_tag),
]


class Message(BaseModel):
    """
    Conversation Message

    Extra keys are preserved so the OpenAI passthrough forwards them untouched.
    """

    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant"]
    content: Union[str, list[ContentPart], None] = None
    # Transient UI fields, stripped before a request is built
    reasoning_content: Optional[str] = None
    updating: Optional[bool] = None

    def without_transient_fields(self) -> "Message":
        return self.model_copy(update={"reasoning_content": None, "updating": None})

    def to_payload(self) -> dict[str, Any]:
        """Serialize the message in the OpenAI chat shape"""
        return self.model_dump(exclude_none=True, exclude={"reasoning_content", "updating"})


class AdvancedSettings(CamelModel):
    system_prompt: Optional[str] = None


class APIConfig(CamelModel):
    """
    API Configuration

    Immutable for the duration of one call.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model_name: Optional[str] = None
    # "openai" / "gemini" / "claude"; anything else falls back to URL detection
    api_format: Optional[str] = None
    advanced_settings: Optional[AdvancedSettings] = None

    @property
    def system_prompt(self) -> str:
        if self.advanced_settings is None:
            return ""
        return self.advanced_settings.system_prompt or ""


class WebpagePage(CamelModel):
    title: str = ""
    url: str = ""
    content: str = ""
    is_current: bool = False


class WebpageInfo(CamelModel):
    pages: list[WebpagePage] = Field(default_factory=list)


class ChatParams(CamelModel):
    """Parameters of one chat call"""

    messages: list[Message] = Field(default_factory=list)
    api_config: APIConfig
    user_language: str = ""
    webpage_info: Optional[WebpageInfo] = None


class CallOptions(CamelModel):
    """Per-call behaviour switches"""

    detect_misfiled_think_silently: bool = False
    misfiled_think_silently_prefix: Optional[str] = None
    misfiled_think_silently_prefixes: Optional[list[str]] = None

    def resolve_prefixes(self, default_prefix: str) -> list[str]:
        """
        Normalized guard prefixes.

        A non-empty prefix list wins over the single prefix, which wins over the default.
        Entries are trimmed, lower-cased, de-duplicated (first occurrence kept) and blanks dropped.
        """
        if self.misfiled_think_silently_prefixes:
            raw = self.misfiled_think_silently_prefixes
        elif self.misfiled_think_silently_prefix is not None:
            raw = [self.misfiled_think_silently_prefix]
        else:
            raw = [default_prefix]

        prefixes: list[str] = []
        for prefix in raw:
            normalized = str(prefix or "").strip().lower()
            if normalized and normalized not in prefixes:
                prefixes.append(normalized)
        return prefixes


@dataclass
class AccumulatedMessage:
    """
    Accumulated Reply

    Owned by exactly one in-flight call. Both fields only ever grow.
    """

    content: str = ""
    reasoning_content: str = ""

    def append(self, content: str = "", reasoning_content: str = "") -> bool:
        """
        Append a delta

        Returns:
            bool: Whether anything was appended
        """
        if content:
            self.content += content
        if reasoning_content:
            self.reasoning_content += reasoning_content
        return bool(content or reasoning_content)

    def copy(self) -> "AccumulatedMessage":
        return AccumulatedMessage(content=self.content, reasoning_content=self.reasoning_content)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
