"""
Chat Service Module

Entry point of the adapter: validates the call, resolves the provider profile,
composes the upstream request and streams the reply into the history store and
UI callback.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Optional, Protocol, Union

import httpx

from cerebr_chat.common.api_url import UrlNormalizer, normalize_chat_completions_url
from cerebr_chat.common.errors import AppError, ConfigError, MisfiledThinkError
from cerebr_chat.common.i18n import Translator, translate
from cerebr_chat.common.provider_protocols import ProviderProfile, resolve_provider_profile
from cerebr_chat.config import Settings, get_settings
from cerebr_chat.domain.chat import AccumulatedMessage, CallOptions, ChatParams
from cerebr_chat.providers.base import PreparedRequest, ProviderClient
from cerebr_chat.providers.factory import get_provider_client
from cerebr_chat.services.cancellation import CancellationToken
from cerebr_chat.services.message_builder import compose_system_prompt, prepare_messages
from cerebr_chat.services.misfiled_think_guard import MisfiledThinkGuard
from cerebr_chat.services.stream_decoder import StreamDecoder
from cerebr_chat.services.update_dispatcher import (
    Scheduler,
    Sink,
    UpdateDispatcher,
    asyncio_scheduler,
)

logger = logging.getLogger(__name__)


class HistoryStore(Protocol):
    def update_last_message(self, conversation_id: str, snapshot: AccumulatedMessage) -> None: ...


# (conversation_id, snapshot) -> None
UpdateCallback = Callable[[str, AccumulatedMessage], None]


class ChatCall:
    """
    One prepared chat call

    The request is fully composed and the cancellation token exists before any
    network I/O; ``start_streaming`` performs the request.
    """

    def __init__(
        self,
        client: ProviderClient,
        request: PreparedRequest,
        history_store: Optional[HistoryStore],
        conversation_id: Optional[str],
        on_update: Optional[UpdateCallback],
        guard_prefixes: Optional[list[str]],
        interval_ms: float,
        scheduler: Scheduler = asyncio_scheduler,
    ):
        self.client = client
        self.request = request
        self.history_store = history_store
        self.conversation_id = conversation_id
        self.on_update = on_update
        self.guard_prefixes = guard_prefixes
        self.interval_ms = interval_ms
        self.scheduler = scheduler
        self.controller = CancellationToken()

    @property
    def profile(self) -> ProviderProfile:
        return self.client.profile

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation; safe before, during and after streaming"""
        self.controller.cancel(reason)

    def _sinks(self) -> list[Sink]:
        # Without a store and a conversation id there is nowhere to deliver to
        if self.history_store is None or not self.conversation_id:
            return []
        sinks = [partial(self.history_store.update_last_message, self.conversation_id)]
        if self.on_update is not None:
            sinks.append(partial(self.on_update, self.conversation_id))
        return sinks

    async def start_streaming(self) -> Optional[AccumulatedMessage]:
        """
        Perform the request and stream the reply

        Returns:
            Optional[AccumulatedMessage]: Final reply, or None when cancelled

        Raises:
            TransportError: Upstream failure
            MisfiledThinkError: Misfiled reasoning detected before any dispatch
        """
        if self.controller.cancelled:
            logger.debug("Chat call cancelled before request: conversation=%s", self.conversation_id)
            return None

        work = asyncio.ensure_future(self._stream())
        cancel_waiter = asyncio.ensure_future(self.controller.wait())
        try:
            done, _ = await asyncio.wait(
                {work, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_waiter.cancel()
            if not work.done() and not self.controller.cancelled:
                # The caller itself was cancelled
                work.cancel()

        if work in done:
            return work.result()

        work.cancel()
        try:
            await work
        except asyncio.CancelledError:
            pass
        except AppError as e:
            logger.debug("Ignoring error raised while cancelling: %s", e.message)
        logger.debug("Chat call cancelled: conversation=%s", self.conversation_id)
        return None

    async def _stream(self) -> Optional[AccumulatedMessage]:
        accumulator = AccumulatedMessage()
        dispatcher = UpdateDispatcher(
            accumulator,
            sinks=self._sinks(),
            interval_ms=self.interval_ms,
            scheduler=self.scheduler,
        )
        guard = None
        if self.guard_prefixes is not None:
            guard = MisfiledThinkGuard(self.guard_prefixes)
        decoder = StreamDecoder(self.client, accumulator, dispatcher, guard)

        try:
            async with self.client.open_stream(self.request) as reader:
                return await decoder.run(reader, self.controller)
        except MisfiledThinkError:
            logger.info(
                "Chat stream aborted by misfiled reasoning guard: conversation=%s",
                self.conversation_id,
            )
            raise
        finally:
            dispatcher.close()


def call_api(
    params: Union[ChatParams, dict[str, Any]],
    history_store: Optional[HistoryStore],
    conversation_id: Optional[str],
    on_update: Optional[UpdateCallback],
    options: Union[CallOptions, dict[str, Any], None] = None,
    *,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    normalize_url: UrlNormalizer = normalize_chat_completions_url,
    translator: Optional[Translator] = None,
    scheduler: Scheduler = asyncio_scheduler,
) -> ChatCall:
    """
    Prepare a streaming chat call

    Args:
        params: Messages, API config, user language and optional webpage context
        history_store: Receives ``update_last_message(conversation_id, snapshot)``
        conversation_id: Conversation being updated
        on_update: UI callback ``(conversation_id, snapshot)``
        options: Misfiled reasoning detection switches
        settings: Adapter settings, defaults to the cached configuration
        transport: Optional httpx transport
        normalize_url: Base URL normalizer
        translator: Localized string lookup, defaults to the built-in catalog
        scheduler: Timer factory for the update dispatcher

    Returns:
        ChatCall: Prepared call; nothing has been sent yet

    Raises:
        ConfigError: Base URL or API key missing
    """
    settings = settings or get_settings()
    if not isinstance(params, ChatParams):
        params = ChatParams.model_validate(params)
    if not isinstance(options, CallOptions):
        options = CallOptions.model_validate(options or {})
    if translator is None:
        translator = partial(translate, language=params.user_language or None)

    api_config = params.api_config
    base_url = normalize_url(api_config.base_url)
    if not base_url or not api_config.api_key:
        raise ConfigError(message=translator("error_api_config_incomplete"))

    system_prompt = compose_system_prompt(
        api_config,
        params.user_language,
        params.webpage_info,
        translator=translator,
        placeholder=settings.USER_LANGUAGE_PLACEHOLDER,
    )
    messages = prepare_messages(params.messages, system_prompt)

    profile = resolve_provider_profile(base_url, api_config.api_format)
    client = get_provider_client(
        profile, settings=settings, transport=transport, translator=translator
    )
    request = client.build_request(base_url, api_config, messages)

    guard_prefixes = None
    if options.detect_misfiled_think_silently and profile is ProviderProfile.OPENAI:
        guard_prefixes = options.resolve_prefixes(settings.MISFILED_THINK_PREFIX)

    logger.debug(
        "Prepared chat call: profile=%s model=%s messages=%d guard=%s",
        profile.value,
        request.body.get("model", api_config.model_name),
        len(messages),
        guard_prefixes,
    )

    return ChatCall(
        client=client,
        request=request,
        history_store=history_store,
        conversation_id=conversation_id,
        on_update=on_update,
        guard_prefixes=guard_prefixes,
        interval_ms=settings.UPDATE_INTERVAL_MS,
        scheduler=scheduler,
    )
