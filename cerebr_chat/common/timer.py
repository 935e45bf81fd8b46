"""
Timer Module

Provides stream latency statistics (time to first byte, total time) and the
millisecond clock used for update throttling.
"""

import time
from typing import Callable, Optional


def monotonic_ms() -> float:
    """Current monotonic time in milliseconds"""
    return time.monotonic() * 1000


class Timer:
    """
    Stream Timer

    Measures the latency metrics of one streamed response:
    - Time to First Byte (TTFB)
    - Total Time

    Example:
        timer = Timer().start()
        # ... open stream ...
        timer.mark_first_byte()  # Received first chunk
        # ... drain stream ...
        timer.stop()
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._start_time: Optional[float] = None
        self._first_byte_time: Optional[float] = None
        self._end_time: Optional[float] = None

    def start(self) -> "Timer":
        self._start_time = self._clock()
        self._first_byte_time = None
        self._end_time = None
        return self

    def mark_first_byte(self) -> "Timer":
        """
        Mark first byte time

        Subsequent calls are ignored if already marked.
        """
        if self._first_byte_time is None:
            self._first_byte_time = self._clock()
        return self

    def stop(self) -> "Timer":
        self._end_time = self._clock()
        return self

    @property
    def first_byte_delay_ms(self) -> Optional[int]:
        if self._start_time is None or self._first_byte_time is None:
            return None
        return int((self._first_byte_time - self._start_time) * 1000)

    @property
    def total_time_ms(self) -> Optional[int]:
        if self._start_time is None or self._end_time is None:
            return None
        return int((self._end_time - self._start_time) * 1000)
