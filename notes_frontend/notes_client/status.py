import asyncio
import itertools
import logging
from typing import Callable, Dict, Optional

from notes_client.config import STATUS_CLEAR_SECONDS
from notes_client.schemas import StatusKind, StatusMessage

logger = logging.getLogger(__name__)


class StatusNotifier:
    """
    Holds the current status message and clears it after a delay.

    Every message gets a sequence number. A clear timer only clears the
    message it was scheduled for, so a late timer never erases a newer
    message, even one with the same text.
    """

    def __init__(
        self,
        clear_after: float = STATUS_CLEAR_SECONDS,
        on_change: Optional[Callable[[StatusMessage], None]] = None,
    ) -> None:
        self._clear_after = clear_after
        self._on_change = on_change
        self._sequence = itertools.count(1)
        self._current = StatusMessage()
        self._timers: Dict[int, asyncio.TimerHandle] = {}

    @property
    def current(self) -> StatusMessage:
        return self._current

    # PUBLIC_INTERFACE
    def announce(self, text: str, kind: StatusKind = StatusKind.INFO) -> StatusMessage:
        """Show `text`; empty text clears immediately without a timer."""
        message = StatusMessage(text=text or "", kind=kind, sequence=next(self._sequence))
        self._set(message)
        if message.text:
            loop = asyncio.get_running_loop()
            self._timers[message.sequence] = loop.call_later(self._clear_after, self._expire, message.sequence)
        return message

    def clear(self) -> None:
        self.announce("")

    def close(self) -> None:
        """Cancel all outstanding clear timers."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    def _expire(self, sequence: int) -> None:
        self._timers.pop(sequence, None)
        if self._current.sequence != sequence:
            return
        self._set(StatusMessage(text="", kind=self._current.kind, sequence=next(self._sequence)))

    def _set(self, message: StatusMessage) -> None:
        self._current = message
        if self._on_change is not None:
            self._on_change(message)
