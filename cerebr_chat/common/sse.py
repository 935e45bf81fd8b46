"""
SSE Line Decoder

Splits an upstream byte stream into ``data:`` payloads, one per newline-terminated line.
"""

from __future__ import annotations

import codecs
from typing import Optional

DATA_MARKER = "data:"
DONE_SENTINEL = "[DONE]"


class SSELineDecoder:
    """
    Incremental SSE decoder.

    - Bytes are decoded as UTF-8 incrementally, so a character split across two
      chunks is reassembled
    - Only complete lines are emitted; the unterminated tail stays buffered
    - Supports CRLF (\\r\\n)
    - Only ``data:`` lines are returned, other fields and blank lines are ignored
    - The ``[DONE]`` sentinel is swallowed
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buf = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Append bytes and return the data payloads of every completed line."""
        if not chunk:
            return []
        self._buf += self._decoder.decode(chunk)
        return self._drain()

    def flush(self) -> list[str]:
        """
        Decode whatever is left once the stream has ended.

        A trailing line without a newline is discarded, matching what the read
        loop does with a never-terminated line.
        """
        self._buf += self._decoder.decode(b"", final=True)
        return self._drain()

    def _drain(self) -> list[str]:
        payloads: list[str] = []
        while True:
            newline_index = self._buf.find("\n")
            if newline_index == -1:
                break
            line = self._buf[:newline_index]
            self._buf = self._buf[newline_index + 1:]
            payload = self._extract_data_payload(line)
            if payload is not None:
                payloads.append(payload)
        return payloads

    @staticmethod
    def _extract_data_payload(line: str) -> Optional[str]:
        if line.endswith("\r"):
            line = line[:-1]
        if not line.startswith(DATA_MARKER):
            return None
        value = line[len(DATA_MARKER):]
        if value.startswith(" "):
            value = value[1:]
        if value == DONE_SENTINEL:
            return None
        return value
