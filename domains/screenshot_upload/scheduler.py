"""
Batch scheduler.

Continuous mode runs a batch immediately and then on every interval tick;
a tick that arrives while a batch is still running is dropped. One-shot
mode runs a single batch and waits a short grace period before the
process exits.
"""

import asyncio
from enum import Enum
from typing import Optional

from loguru import logger

from app.utils.helpers import plural
from domains.screenshot_upload.dispatcher import BatchRunner
from domains.screenshot_upload.errors import DirectoryUnavailable


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Scheduler:
    """Drives batch runs without ever overlapping them."""

    def __init__(self, runner: BatchRunner, interval: float = 60.0, grace_period: float = 10.0):
        self.runner = runner
        self.interval = interval
        self.grace_period = grace_period
        self.state = SchedulerState.IDLE

        self._task: Optional[asyncio.Task] = None
        self._failure: Optional[BaseException] = None
        self._failed: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    async def tick(self) -> Optional[int]:
        """
        Run one batch unless one is already in flight.

        Returns:
            Number of screenshots delivered, or None if the tick was dropped
        """
        if self.state is not SchedulerState.IDLE:
            logger.debug(f"Tick dropped; scheduler is {self.state.value}")
            return None

        self.state = SchedulerState.RUNNING
        try:
            delivered = await self.runner.run_batch()
        except DirectoryUnavailable as e:
            logger.error(str(e))
            delivered = 0
        finally:
            if self.state is SchedulerState.RUNNING:
                self.state = SchedulerState.IDLE

        if delivered > 0:
            logger.info(f"Uploaded {plural(delivered, 'screenshot')}")
        else:
            logger.info("No screenshots to upload")
        return delivered

    async def run_once(self) -> int:
        """Run a single batch, then wait out the grace period."""
        delivered = await self.tick()
        self.state = SchedulerState.STOPPED

        logger.info(f"Closing in {self.grace_period:g} seconds...")
        await asyncio.sleep(self.grace_period)
        return delivered or 0

    async def run_forever(self) -> None:
        """
        Run batches every ``interval`` seconds until a batch fails.

        Errors other than an unavailable directory escape from here so the
        process can decide how to exit.
        """
        self._failed = asyncio.Event()
        self._spawn_tick()

        while True:
            try:
                await asyncio.wait_for(self._failed.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                self._spawn_tick()
                continue

            self.state = SchedulerState.STOPPED
            raise self._failure

    def _spawn_tick(self) -> None:
        if self.running or (self._task is not None and not self._task.done()):
            logger.warning("Previous batch still running; skipping this tick")
            return

        self._task = asyncio.create_task(self.tick())
        self._task.add_done_callback(self._on_tick_done)

    def _on_tick_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._failure = exc
            self._failed.set()
