"""Countdown that rate-limits one-time-code send requests."""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class CooldownTimer:
    """
    Seconds-remaining counter driven by a single asyncio task.

    start() always cancels the running countdown before starting a new one,
    so two tasks never decrement `remaining` at the same time. The owner must
    call cancel() when it is discarded.
    """

    def __init__(
        self,
        interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_tick: Callable[[int], None] | None = None,
    ):
        self.interval = interval
        self.remaining = 0
        self._sleep = sleep
        self._on_tick = on_tick
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def start(self, duration: int) -> None:
        """Set the countdown to `duration` seconds and begin ticking."""
        self.cancel()
        self.remaining = max(int(duration), 0)
        if self.remaining:
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while self.remaining > 0:
            await self._sleep(self.interval)
            self.remaining -= 1
            if self._on_tick is not None:
                self._on_tick(self.remaining)
        if self._task is asyncio.current_task():
            self._task = None

    async def wait(self) -> None:
        """Block until the current countdown reaches zero or is cancelled."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.remaining = 0
