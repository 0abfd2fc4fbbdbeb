"""Frame-driven tick source running on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

__all__ = ["Timer", "DEFAULT_FRAME_INTERVAL"]

LOG = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL = 1.0 / 60.0


class Timer:
    """Invoke ``callback(delta_ms)`` once per frame until stopped.

    ``delta_ms`` is the time elapsed since the previous tick, measured with
    ``clock`` (seconds) and reported in milliseconds.  Ticks never overlap:
    the next frame is scheduled only after the callback has returned, so a
    callback may call :meth:`stop` to end the run.
    """

    def __init__(
        self,
        callback: Callable[[float], None],
        debug: bool = False,
        *,
        interval: float = DEFAULT_FRAME_INTERVAL,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if not callable(callback):
            raise TypeError("param 'callback' has to be a function.")
        self.callback = callback
        self.debug = debug
        self.interval = interval
        self._clock = clock
        self._handle: Optional[asyncio.TimerHandle] = None
        self._running = False
        self._last_frame = 0.0
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start ticking on the running loop; the first tick fires at once."""

        if self._running:
            return
        self._loop = asyncio.get_running_loop()
        self._running = True
        self._last_frame = self._clock()
        if self.debug:
            LOG.debug("timer started (interval=%.4fs)", self.interval)
        self._tick()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self.debug:
            LOG.debug("timer stopped")

    def _tick(self) -> None:
        self._handle = None
        now = self._clock()
        delta_ms = (now - self._last_frame) * 1000.0
        self._last_frame = now
        try:
            self.callback(delta_ms)
        except Exception:
            self._running = False
            raise
        if self._running and self._loop is not None:
            self._handle = self._loop.call_later(self.interval, self._tick)
