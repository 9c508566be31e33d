from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, tzinfo
from typing import Protocol

from metro_board.infrastructure.time_utils import AMSTERDAM_TZ

logger = logging.getLogger(__name__)

TickHandler = Callable[[], Awaitable[None]]


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime: ...


class Timer(Protocol):
    """One-shot timer that invokes its tick handler after a delay."""

    def on_tick(self, handler: TickHandler) -> None: ...

    def start(self, delay: float) -> None: ...

    def stop(self) -> None: ...

    async def wait_idle(self) -> None: ...


class SystemClock:
    """Wall clock in the board's display timezone."""

    def __init__(self, tz: tzinfo = AMSTERDAM_TZ) -> None:
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(tz=self._tz)


class AsyncioTimer:
    """Timer backed by ``loop.call_later``.

    start() replaces any armed tick; the handler runs as its own task so the
    loop callback itself never blocks. A handler that raises is logged, never
    left as an unretrieved task exception.
    """

    def __init__(self) -> None:
        self._handler: TickHandler | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def on_tick(self, handler: TickHandler) -> None:
        self._handler = handler

    def start(self, delay: float) -> None:
        """Arm the timer to fire once after ``delay`` seconds."""
        self.stop()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(max(0.0, delay), self._fire)

    def stop(self) -> None:
        """Disarm the timer. A tick already running is left to finish."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def running(self) -> bool:
        """True while a fired tick handler has not finished."""
        return self._task is not None and not self._task.done()

    async def wait_idle(self) -> None:
        """Wait for a tick handler that is already running to finish."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})

    def _fire(self) -> None:
        self._handle = None
        if self._handler is None:
            logger.warning("Timer fired without a tick handler")
            return
        self._task = asyncio.create_task(self._handler())
        self._task.add_done_callback(self._on_tick_done)

    def _on_tick_done(self, task: asyncio.Task[None]) -> None:
        if self._task is task:
            self._task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Tick handler failed: %s", exc, exc_info=exc)
