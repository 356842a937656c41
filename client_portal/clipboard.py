"""Copy-to-clipboard with short-lived "copied" feedback per field."""

import inspect
import logging
import time
from typing import Callable, Optional

from .config import DisplayConfig
from .notices import Notice

logger = logging.getLogger(__name__)


class ClipboardFeedback:
    """Writes values through ``writer`` and remembers the last copied field.

    ``writer`` is the platform clipboard call (sync or async). Its failure
    yields an error notice and leaves the feedback state untouched.
    """

    def __init__(
        self,
        writer: Callable[[str], object],
        feedback_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.writer = writer
        self.feedback_seconds = feedback_seconds
        self.clock = clock
        self._copied_field: Optional[str] = None
        self._copied_at = 0.0

    @classmethod
    def from_config(cls, writer: Callable[[str], object], display: DisplayConfig) -> "ClipboardFeedback":
        return cls(writer, feedback_seconds=display.copy_feedback_s)

    async def copy(self, text: str, field: str) -> Notice:
        try:
            result = self.writer(text)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"Clipboard write for {field} failed: {e}")
            return Notice(title="Failed to copy", variant="destructive")

        self._copied_field = field
        self._copied_at = self.clock()
        return Notice(title="Copied to clipboard")

    @property
    def copied_field(self) -> Optional[str]:
        if self._copied_field and self.clock() - self._copied_at < self.feedback_seconds:
            return self._copied_field
        return None

    def is_copied(self, field: str) -> bool:
        return self.copied_field == field
