import asyncio
from typing import Callable

DEBOUNCE_SECONDS = 0.15


class Debouncer:
    """Collapse bursts of notifications into one callback per quiet window.

    Each `notify` restarts the timer; the callback runs once `delay` seconds
    pass without another notification.
    """

    def __init__(self, callback: Callable[[], None], delay: float = DEBOUNCE_SECONDS):
        self.callback = callback
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def notify(self) -> None:
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Outside the event loop there is nothing to coalesce with.
            self.callback()
            return
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
