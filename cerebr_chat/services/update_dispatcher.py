"""
Update Dispatcher Module

Rate-limits how often the accumulated reply is pushed to the history store and
the UI callback, while guaranteeing the final state is always delivered.
"""

import asyncio
import logging
import math
from enum import Enum
from typing import Callable, Optional, Protocol

from cerebr_chat.common.timer import monotonic_ms
from cerebr_chat.domain.chat import AccumulatedMessage

logger = logging.getLogger(__name__)

Sink = Callable[[AccumulatedMessage], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


# (delay_ms, callback) -> handle
Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def asyncio_scheduler(delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule a callback on the running event loop"""
    return asyncio.get_running_loop().call_later(delay_ms / 1000, callback)


class DispatcherState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class UpdateDispatcher:
    """
    Throttled snapshot dispatcher

    Two states: IDLE (no flush scheduled) and PENDING (one flush scheduled).
    A notification while IDLE flushes immediately when more than the interval
    has passed since the last flush, otherwise it schedules a flush for the
    remainder of the interval. Notifications while PENDING are absorbed; the
    scheduled flush snapshots whatever has accumulated by then.

    Example:
        dispatcher = UpdateDispatcher(message, sinks=[store_sink, ui_sink])
        message.append("Hel")
        dispatcher.notify()
        ...
        dispatcher.finish()
    """

    def __init__(
        self,
        source: AccumulatedMessage,
        sinks: list[Sink],
        interval_ms: float = 100,
        clock: Callable[[], float] = monotonic_ms,
        scheduler: Scheduler = asyncio_scheduler,
    ):
        """
        Initialize dispatcher

        Args:
            source: Live accumulator; never handed out, only copied
            sinks: Receivers of snapshots; each gets its own copy per flush.
                An empty list turns flushes into no-ops
            interval_ms: Minimum time between two flushes
            clock: Millisecond clock
            scheduler: Timer factory
        """
        self.source = source
        self.sinks = list(sinks)
        self.interval_ms = interval_ms
        self._clock = clock
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None
        self._last_flush_at: Optional[float] = None
        self._closed = False
        self.flush_count = 0

    @property
    def state(self) -> DispatcherState:
        return DispatcherState.PENDING if self._handle is not None else DispatcherState.IDLE

    @property
    def has_dispatched(self) -> bool:
        return self.flush_count > 0

    def _elapsed_ms(self) -> float:
        if self._last_flush_at is None:
            return math.inf
        return self._clock() - self._last_flush_at

    def notify(self) -> None:
        """Signal that the accumulator changed and should be surfaced"""
        if self._closed or self._handle is not None:
            return
        elapsed = self._elapsed_ms()
        if elapsed > self.interval_ms:
            self.flush()
        else:
            self._handle = self._scheduler(self.interval_ms - elapsed, self.flush)

    def flush(self) -> None:
        """Deliver a snapshot to every sink now"""
        self._cancel_pending()
        if self._closed or not self.sinks:
            return
        for sink in self.sinks:
            sink(self.source.copy())
        self._last_flush_at = self._clock()
        self.flush_count += 1

    def finish(self) -> None:
        """
        Final flush at end of stream

        Flushes when a flush is pending, none has happened yet, or any time has
        passed since the last one, then closes the dispatcher.
        """
        if self._closed:
            return
        if self._handle is not None or self._elapsed_ms() > 0:
            self.flush()
        self.close()

    def close(self) -> None:
        """Drop any pending flush; later notifications and flushes are ignored"""
        self._cancel_pending()
        self._closed = True

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
