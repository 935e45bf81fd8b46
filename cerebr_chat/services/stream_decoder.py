"""
Stream Decoder Module

Drives the read loop over an upstream SSE stream: reassembles lines, extracts
provider deltas into the accumulator, consults the misfiled reasoning guard and
hands surfaced changes to the update dispatcher.
"""

import logging
from enum import Enum
from typing import Optional

from cerebr_chat.common.errors import MisfiledThinkError, RecordParseError
from cerebr_chat.common.sse import SSELineDecoder
from cerebr_chat.domain.chat import AccumulatedMessage
from cerebr_chat.providers.base import ProviderClient, StreamReader
from cerebr_chat.services.cancellation import CancellationToken
from cerebr_chat.services.misfiled_think_guard import GuardVerdict, MisfiledThinkGuard
from cerebr_chat.services.update_dispatcher import UpdateDispatcher

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    READING = "reading"
    DONE = "done"
    ABORTED = "aborted"


class StreamDecoder:
    """
    Stream Decoder

    READING until end of stream (DONE) or until cancellation / a guard trip
    (ABORTED). Deltas are applied strictly in the order their records appear.
    """

    def __init__(
        self,
        client: ProviderClient,
        accumulator: AccumulatedMessage,
        dispatcher: UpdateDispatcher,
        guard: Optional[MisfiledThinkGuard] = None,
    ):
        self.client = client
        self.accumulator = accumulator
        self.dispatcher = dispatcher
        self.guard = guard
        self.state = StreamState.READING
        self._lines = SSELineDecoder()

    async def run(
        self, reader: StreamReader, cancel_token: CancellationToken
    ) -> Optional[AccumulatedMessage]:
        """
        Consume the stream until it ends

        Returns:
            Optional[AccumulatedMessage]: The final accumulator, or None when cancelled

        Raises:
            MisfiledThinkError: The guard detected misfiled reasoning
        """
        try:
            while True:
                if cancel_token.cancelled:
                    self._abort("cancelled")
                    return None
                chunk = await reader.read()
                if cancel_token.cancelled:
                    self._abort("cancelled")
                    return None
                if chunk is None:
                    self.feed_end()
                    return self.accumulator
                self.feed(chunk)
        except MisfiledThinkError:
            self._abort("misfiled reasoning")
            raise

    def feed(self, chunk: bytes) -> None:
        for payload in self._lines.feed(chunk):
            self._handle_payload(payload)

    def feed_end(self) -> None:
        """Handle end of stream and force the final flush"""
        for payload in self._lines.flush():
            self._handle_payload(payload)
        self.state = StreamState.DONE
        self.dispatcher.finish()

    def _abort(self, reason: str) -> None:
        logger.debug("Stream aborted: reason=%s profile=%s", reason, self.client.profile.value)
        self.state = StreamState.ABORTED
        self.dispatcher.close()

    def _handle_payload(self, payload: str) -> None:
        if self.state is not StreamState.READING:
            return

        # Only record decoding is recoverable; the guard below runs outside
        # this handler so its abort can never be swallowed
        try:
            delta = self.client.parse_record(payload)
        except RecordParseError as e:
            logger.warning("Skipping malformed stream record: %s", e.message)
            return

        if delta.stop_reason:
            logger.debug(
                "Stream stop reason: profile=%s reason=%s",
                self.client.profile.value,
                delta.stop_reason,
            )

        if not self.accumulator.append(delta.content, delta.reasoning_content):
            return

        if self.guard is not None:
            verdict = self.guard.inspect(self.accumulator, self.dispatcher.has_dispatched)
            if verdict is GuardVerdict.HOLD:
                return

        self.dispatcher.notify()
