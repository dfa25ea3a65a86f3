# debounce.py
# Single-slot trailing-edge timer: arming a new call always cancels the previous one.

import asyncio
from typing import Callable, Optional


class Debouncer:
    def __init__(self, delay: float):
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, fn: Callable[[], None]) -> None:
        """Run `fn` once `delay` seconds pass without another schedule() call."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, fn)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, fn: Callable[[], None]) -> None:
        self._handle = None
        fn()
