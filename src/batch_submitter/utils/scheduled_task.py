"""
Base class for tasks that run repeatedly at a fixed period.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional


class ScheduledTask(ABC):
    """
    Runs run_task() immediately and then every period_seconds while running.

    A run that returns True is followed by another run without waiting.
    An exception raised by run_task() stops the task and is re-raised to
    whoever awaits run().
    """

    def __init__(self, period_seconds: float):
        """
        Initialize the scheduled task.

        Args:
            period_seconds: Delay between runs in seconds

        Raises:
            ValueError: If period_seconds is negative
        """
        if period_seconds < 0:
            raise ValueError(f"period_seconds must be >= 0. Received {period_seconds}")

        self.period_seconds = period_seconds
        self.is_running = False
        self._task: Optional[asyncio.Task] = None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def start(self) -> asyncio.Task:
        """
        Start the loop in the background. Must be called from a running event loop.

        Returns:
            The asyncio task running the loop
        """
        if not self.is_running:
            self.is_running = True
            self._task = asyncio.create_task(self.run())
        return self._task

    def stop(self) -> None:
        """Stop the loop. A run already in progress is allowed to complete."""
        self.logger.info("Stopping scheduled task")
        self.is_running = False

    async def run(self) -> None:
        """Run the task until stopped."""
        self.is_running = True
        while self.is_running:
            try:
                rerun_immediately = await self.run_task()
            except Exception as e:
                self.logger.error(
                    f"Scheduled task failed, stopping: {e}",
                    exc_info=True
                )
                self.is_running = False
                raise

            if not self.is_running:
                break

            try:
                # sleep(0) still yields so stop() can be observed between runs
                await asyncio.sleep(0 if rerun_immediately else self.period_seconds)
            except asyncio.CancelledError:
                self.logger.info("Scheduled task cancelled")
                self.is_running = False
                raise

    @abstractmethod
    async def run_task(self) -> bool:
        """
        Body of one run.

        Returns:
            True to run again immediately, False to wait period_seconds
        """
