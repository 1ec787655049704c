"""Timer-reset debouncing on the running asyncio loop."""

import asyncio
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Commit a value only after ``delay`` seconds without a newer push.

    Each push cancels the pending timer and schedules a new one, so a burst
    of pushes produces one commit carrying the last value.
    """

    def __init__(self, delay: float, callback: Callable[[T], Any]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._value: Optional[T] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: T):
        self.cancel()
        self._value = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> bool:
        """Commit the pending value now. Returns False if nothing was pending."""
        if self._handle is None:
            return False
        self.cancel()
        self._commit()
        return True

    def _fire(self):
        self._handle = None
        self._commit()

    def _commit(self):
        value, self._value = self._value, None
        self.callback(value)
