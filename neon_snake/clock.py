"""Fixed-interval tick scheduling."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

TickCallback = Callable[[int], Union[None, Awaitable[Any]]]


class SimulationClock:
    """
    Fires ``on_tick(interval)`` once per elapsed interval while running.

    ``interval`` is a callable returning milliseconds and is read again for
    every scheduling decision, so speed changes apply from the next tick.
    """

    def __init__(self, interval: Callable[[], int], on_tick: TickCallback, sleep=asyncio.sleep):
        self.interval = interval
        self.on_tick = on_tick
        self._sleep = sleep
        self._accumulated = 0.0
        self.running = False
        self.closed = False
        self.ticks = 0

    def start(self):
        self._accumulated = 0.0
        self.running = True

    def stop(self):
        self._accumulated = 0.0
        self.running = False

    def close(self):
        self.stop()
        self.closed = True

    def feed(self, elapsed_ms: float) -> int:
        """Account for ``elapsed_ms`` of wall time; return how many ticks fired."""
        if not self.running:
            return 0
        self._accumulated += elapsed_ms
        fired = 0
        while self.running:
            interval = self.interval()
            if self._accumulated < interval:
                break
            self._accumulated -= interval
            self._fire(interval)
            fired += 1
        return fired

    def _fire(self, interval: int):
        self.ticks += 1
        return self.on_tick(interval)

    async def run(self):
        logger.info("Simulation clock started")
        while not self.closed:
            interval = self.interval()
            await self._sleep(interval / 1000)
            if not self.running:
                continue
            result = self._fire(interval)
            if inspect.isawaitable(result):
                await result
        logger.info(f"Simulation clock closed after {self.ticks} ticks")
