"""
Test Configuration Module
"""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from cerebr_chat.config import Settings, get_settings


class FakeClock:
    """Millisecond clock advanced by hand"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeHandle:
    def __init__(self, scheduler: "FakeScheduler", due: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Scheduler driven by a FakeClock; timers fire on ``advance``"""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.handles: list[FakeHandle] = []

    def __call__(self, delay_ms: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self, self.clock.now + delay_ms, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ms: float) -> None:
        target = self.clock.now + ms
        for handle in sorted(self.pending, key=lambda h: h.due):
            if handle.due <= target and not handle.cancelled:
                self.clock.now = handle.due
                handle.cancelled = True
                handle.callback()
        self.clock.now = target


def sse_lines(*records: Any, done: bool = True) -> list[bytes]:
    """Encode records as ``data:`` lines, one chunk per record"""
    chunks = [
        f"data: {record if isinstance(record, str) else json.dumps(record)}\n\n".encode()
        for record in records
    ]
    if done:
        chunks.append(b"data: [DONE]\n\n")
    return chunks


class RecordingTransport:
    """Builds an httpx.MockTransport that streams the given chunks and records requests"""

    def __init__(
        self,
        chunks: Optional[list[bytes]] = None,
        status_code: int = 200,
        body: bytes = b"",
    ):
        self.chunks = chunks or []
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    async def _stream(self):
        for chunk in self.chunks:
            yield chunk

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(
            self.status_code,
            headers={"content-type": "text/event-stream"},
            content=self._stream(),
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_scheduler(fake_clock) -> FakeScheduler:
    return FakeScheduler(fake_clock)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def encode_sse() -> Callable[..., list[bytes]]:
    return sse_lines
