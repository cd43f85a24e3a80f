"""
Countdown Ticker
================
Drives ``OTPEntryFlow.tick()`` once per second while the screen is mounted.
"""

import asyncio
from typing import Optional

import structlog

from .flow import OTPEntryFlow

logger = structlog.get_logger(__name__)


class CountdownTicker:
    """
    Periodic tick source for one flow.

    Example:
        async with CountdownTicker(flow):
            ...  # screen mounted
        # ticker stopped, no callback left behind
    """

    def __init__(self, flow: OTPEntryFlow, interval: float = 1.0):
        self.flow = flow
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel the tick task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while not self.flow.closed:
            await asyncio.sleep(self.interval)
            if self.flow.closed:
                break
            if not self.flow.can_resend:
                self.flow.tick()
        logger.debug("countdown_ticker_finished", flow_id=self.flow.id)

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
        return False
