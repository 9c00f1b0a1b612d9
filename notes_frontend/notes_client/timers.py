import asyncio
from typing import Any, Callable, Optional


class CancellableTimer:
    """A one-shot `loop.call_later` wrapper that can be cancelled or re-armed."""

    def __init__(self, delay: float, callback: Callable[..., Any]) -> None:
        self._delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self, *args: Any) -> None:
        """Schedule the callback, replacing any pending schedule."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        self._callback(*args)


class Debouncer:
    """
    Collapse bursts of calls into one call with the latest arguments.

    Each call cancels the pending one; the callback runs `delay` seconds after
    the last call of a burst.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]) -> None:
        self._timer = CancellableTimer(delay, callback)

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def __call__(self, *args: Any) -> None:
        self._timer.start(*args)

    def cancel(self) -> None:
        self._timer.cancel()
