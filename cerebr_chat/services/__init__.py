"""
Service layer module initialization
"""

from cerebr_chat.services.cancellation import CancellationToken
from cerebr_chat.services.chat_service import ChatCall, HistoryStore, call_api
from cerebr_chat.services.message_builder import compose_system_prompt, prepare_messages
from cerebr_chat.services.misfiled_think_guard import GuardVerdict, MisfiledThinkGuard
from cerebr_chat.services.stream_decoder import StreamDecoder, StreamState
from cerebr_chat.services.update_dispatcher import DispatcherState, UpdateDispatcher

__all__ = [
    "CancellationToken",
    "ChatCall",
    "HistoryStore",
    "call_api",
    "compose_system_prompt",
    "prepare_messages",
    "GuardVerdict",
    "MisfiledThinkGuard",
    "StreamDecoder",
    "StreamState",
    "DispatcherState",
    "UpdateDispatcher",
]
