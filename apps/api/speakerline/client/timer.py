"""Cancellable fixed-interval scheduling for the status poller."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from collections.abc import Awaitable, Callable
import logging

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]


class PollTimer(ABC):
    """Start/stop primitive driving the poll loop."""

    @abstractmethod
    def start(self, callback: TickCallback, period: float) -> None:
        """Invoke callback every period seconds until stopped."""

    @abstractmethod
    def stop(self) -> None:
        """Stop scheduling further ticks. A tick already running is not interrupted."""

    @property
    @abstractmethod
    def running(self) -> bool: ...


class AsyncioPollTimer(PollTimer):
    """Sleeps, then awaits the callback, then sleeps again.

    The next tick is only scheduled once the previous callback returns, so
    at most one request is ever in flight. A tick that raises is logged and
    the schedule carries on.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[None] | None = None
        self._generation = 0
        self._ticking = False

    def start(self, callback: TickCallback, period: float) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation, callback, period))

    def stop(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        # Only a sleeping loop is cancelled; a running tick finishes and exits.
        if task is not None and not task.done() and not self._ticking:
            task.cancel()

    @property
    def running(self) -> bool:
        return self._task is not None

    async def _run(self, generation: int, callback: TickCallback, period: float) -> None:
        while generation == self._generation:
            await asyncio.sleep(period)
            if generation != self._generation:
                return
            self._ticking = True
            try:
                await callback()
            except Exception:
                logger.exception("poll_timer.tick_failed")
            finally:
                self._ticking = False
