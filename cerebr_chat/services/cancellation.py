"""
Cancellation Token

Shared cancellation signal handed to the caller before any network I/O starts.
"""

import asyncio
from typing import Optional


class CancellationToken:
    """
    Cooperative cancellation signal

    ``cancel`` may be called from any coroutine or callback on the event loop,
    any number of times. The request and the read loop both observe it.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: Optional[str] = None) -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Block until cancellation is requested"""
        await self._event.wait()
