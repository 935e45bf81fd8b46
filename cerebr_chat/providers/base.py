"""
Upstream Provider Client Base Class

Defines the interface every dialect implements (message translation, request
composition, delta extraction) and the shared streaming transport.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Optional

import httpx

from cerebr_chat.common.errors import RecordParseError, TransportError
from cerebr_chat.common.i18n import Translator, translate
from cerebr_chat.common.provider_protocols import ProviderProfile
from cerebr_chat.common.sanitizer import sanitize_headers, sanitize_url
from cerebr_chat.common.timer import Timer
from cerebr_chat.config import Settings, get_settings
from cerebr_chat.domain.chat import (
    APIConfig,
    ImageContentPart,
    Message,
    ROLE_SYSTEM,
    TextContentPart,
)

logger = logging.getLogger(__name__)

DATA_URL_MIME_PATTERN = re.compile(r"data:([^;]+)")
DEFAULT_IMAGE_MIME_TYPE = "image/png"


@dataclass
class PreparedRequest:
    """
    Prepared Upstream Request

    Final URL, headers and JSON body for one provider call.
    """

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
    method: str = "POST"


@dataclass
class StreamDelta:
    """Incremental output extracted from one SSE record"""

    content: str = ""
    reasoning_content: str = ""
    # Set when the record announces the end of generation
    stop_reason: Optional[str] = None

    @property
    def has_update(self) -> bool:
        return bool(self.content or self.reasoning_content)


def parse_data_url(url: str) -> Optional[tuple[str, str]]:
    """
    Split a data URI into (mime type, base64 payload).

    Returns:
        Optional[tuple[str, str]]: None when the URL is not a data URI
    """
    if not url.startswith("data:"):
        return None
    header, _, payload = url.partition(",")
    match = DATA_URL_MIME_PATTERN.match(header)
    mime_type = match.group(1) if match else DEFAULT_IMAGE_MIME_TYPE
    return mime_type, payload


def system_text(message: Message) -> str:
    """Textual form of a system message's content"""
    if isinstance(message.content, str):
        return message.content
    if message.content is None:
        return ""
    return json.dumps(
        [part.model_dump(exclude_none=True) for part in message.content],
        ensure_ascii=False,
        separators=(",", ":"),
    )


class StreamReader:
    """
    Pull-style reader over a streamed response body.

    ``read`` returns the next chunk or None at end of stream. ``release`` is
    idempotent; the owning context calls it on every exit path.
    """

    def __init__(self, response: httpx.Response, timer: Timer):
        self._chunks = response.aiter_bytes()
        self._timer = timer
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def read(self) -> Optional[bytes]:
        try:
            chunk = await self._chunks.__anext__()
        except StopAsyncIteration:
            return None
        self._timer.mark_first_byte()
        return chunk

    async def release(self) -> None:
        if self._released:
            return
        self._released = True
        await self._chunks.aclose()


class ProviderClient(ABC):
    """
    Upstream Provider Client Abstract Base Class

    One subclass per wire dialect. Translation, composition and extraction are
    pure; only ``open_stream`` touches the network.
    """

    profile: ProviderProfile

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        translator: Optional[Translator] = None,
    ):
        """
        Initialize client

        Args:
            settings: Adapter settings, defaults to the cached configuration
            transport: Optional httpx transport (tests use httpx.MockTransport)
            translator: Localized string lookup
        """
        self.settings = settings or get_settings()
        self.timeout = self.settings.HTTP_TIMEOUT
        self.transport = transport
        self.translator = translator or translate

    @abstractmethod
    def convert_messages(self, messages: list[Message]) -> dict[str, Any]:
        """
        Translate the common message list into the provider's body fields

        Args:
            messages: Messages with transient fields already stripped

        Returns:
            dict: Provider-shaped fragment of the request body
        """
        pass

    @abstractmethod
    def build_request(
        self, url: str, api_config: APIConfig, messages: list[Message]
    ) -> PreparedRequest:
        """
        Compose the final upstream request

        Args:
            url: Normalized chat-completions URL
            api_config: API configuration
            messages: Prepared messages (system prompt already folded in)

        Returns:
            PreparedRequest: URL, headers and body to send
        """
        pass

    @abstractmethod
    def extract_delta(self, record: Any) -> StreamDelta:
        """
        Extract the incremental output from one decoded SSE record

        Unknown shapes yield an empty delta.
        """
        pass

    def parse_record(self, payload: str) -> StreamDelta:
        """
        Decode one SSE data payload and extract its delta

        Raises:
            RecordParseError: The payload is not valid JSON or has an unusable shape
        """
        try:
            record = json.loads(payload)
            return self.extract_delta(record)
        except (ValueError, TypeError, AttributeError, KeyError, IndexError) as e:
            raise RecordParseError(
                message=f"Malformed {self.profile.value} stream record: {e}",
                details={"payload": payload[:200]},
            ) from e

    @staticmethod
    def _split_system(messages: list[Message]) -> tuple[list[Message], list[Message]]:
        """Partition messages into (system messages, turns), keeping order"""
        system = [msg for msg in messages if msg.role == ROLE_SYSTEM]
        turns = [msg for msg in messages if msg.role != ROLE_SYSTEM]
        return system, turns

    @asynccontextmanager
    async def open_stream(self, request: PreparedRequest) -> AsyncIterator[StreamReader]:
        """
        Send the request and expose the response body as a StreamReader

        The response and its reader are released exactly once when the context
        exits, whether it ends normally, with an error, or by cancellation.

        Raises:
            TransportError: Non-success status, timeout, connection or stream failure
        """
        logger.debug(
            "%s Stream Request: method=%s url=%s headers=%s body=%s",
            self.profile.value,
            request.method,
            sanitize_url(request.url),
            sanitize_headers(request.headers),
            json.dumps(request.body, ensure_ascii=False)[:2000],
        )

        timer = Timer().start()

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                async with client.stream(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    json=request.body,
                ) as response:
                    if not response.is_success:
                        await response.aread()
                        timer.mark_first_byte()
                        error_text = response.text.strip()
                        raise TransportError(
                            message=error_text
                            or response.reason_phrase
                            or f"HTTP {response.status_code}",
                            details={"status_code": response.status_code},
                            status_code=response.status_code,
                        )

                    reader = StreamReader(response, timer)
                    try:
                        yield reader
                    finally:
                        await reader.release()

        except httpx.TimeoutException as e:
            raise TransportError(
                message=f"Request timeout: {str(e)}",
                code="upstream_timeout",
                status_code=504,
            ) from e

        except httpx.StreamError as e:
            raise TransportError(
                message=self.translator("error_response_unreadable"),
                code="response_unreadable",
                details={"reason": str(e)},
            ) from e

        except httpx.RequestError as e:
            raise TransportError(
                message=f"Request error: {str(e)}",
                status_code=502,
            ) from e

        finally:
            timer.stop()
            logger.debug(
                "%s Stream finished: first_byte_delay_ms=%s total_time_ms=%s",
                self.profile.value,
                timer.first_byte_delay_ms,
                timer.total_time_ms,
            )


class MultimodalProviderClient(ProviderClient):
    """
    Base for dialects that rebuild message content into their own part shape

    Text and inline (data URI) images are converted; remote images and
    unknown part types are dropped.
    """

    def _convert_content(self, message: Message) -> list[dict[str, Any]]:
        """Convert message content into provider parts; non-data-URI images are skipped"""
        if isinstance(message.content, str):
            return [self._text_part(message.content)]
        if not isinstance(message.content, list):
            return []

        parts: list[dict[str, Any]] = []
        for item in message.content:
            if isinstance(item, TextContentPart):
                parts.append(self._text_part(item.text))
            elif isinstance(item, ImageContentPart):
                data_url = parse_data_url(item.image_url.url)
                if data_url is None:
                    logger.debug(
                        "Skipping non data-URI image for %s: %s",
                        self.profile.value,
                        item.image_url.url[:100],
                    )
                    continue
                parts.append(self._image_part(*data_url))
        return parts

    def _text_part(self, text: str) -> dict[str, Any]:
        return {"type": "text", "text": text}

    @abstractmethod
    def _image_part(self, mime_type: str, data: str) -> dict[str, Any]:
        """Build the provider's inline image part from a decoded data URI"""
        pass
