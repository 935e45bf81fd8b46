"""
Misfiled Reasoning Guard

Some OpenAI-compatible servers stream the model's reasoning in the visible
``content`` channel. When enabled, this guard inspects the start of the content
before anything has been dispatched and aborts the stream if it opens with a
known reasoning prefix, so none of that text ever reaches the user.
"""

import logging
from enum import Enum

from cerebr_chat.common.errors import MisfiledThinkError
from cerebr_chat.domain.chat import AccumulatedMessage

logger = logging.getLogger(__name__)


class GuardVerdict(str, Enum):
    # Content is fine, the guard is now off for the rest of the stream
    PASS = "pass"
    # Too few characters to decide, hold the update back
    HOLD = "hold"


class MisfiledThinkGuard:
    """
    Prefix-based misfiled reasoning detector

    Args:
        prefixes: Normalized (trimmed, lower-cased) prefixes
    """

    def __init__(self, prefixes: list[str]):
        self.prefixes = list(prefixes)
        self.active = bool(self.prefixes)

    def inspect(self, message: AccumulatedMessage, has_dispatched: bool) -> GuardVerdict:
        """
        Inspect the accumulated message after a delta was applied

        Returns:
            GuardVerdict: PASS or HOLD

        Raises:
            MisfiledThinkError: Content starts with a configured prefix
        """
        if not self.active:
            return GuardVerdict.PASS
        if has_dispatched or message.reasoning_content:
            self.active = False
            return GuardVerdict.PASS

        content_start = message.content.lstrip().lower()
        for prefix in self.prefixes:
            if content_start.startswith(prefix):
                logger.info("Misfiled reasoning detected: prefix=%r", prefix)
                raise MisfiledThinkError(details={"prefix": prefix})

        if any(prefix.startswith(content_start) for prefix in self.prefixes):
            return GuardVerdict.HOLD

        # Content only grows, so a start that matches no prefix never will
        self.active = False
        return GuardVerdict.PASS
