"""
Common utilities for periodic tasks.

This module provides the fixed-interval task runner and the metrics helper
used by the sensor polling tasks.
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class TaskMetrics:
    """
    Utility for tracking and logging task execution metrics.

    Usage:
        with TaskMetrics("poll_onewire") as metrics:
            # Do work
            metrics.increment("processed", 5)
            # More work
            metrics.increment("errors", 1)
    """

    def __init__(self, task_name: str):
        self.task_name = task_name
        self.start_time = None
        self.metrics = {
            "processed": 0,
            "errors": 0,
        }

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        self.metrics["duration"] = round(duration, 3)

        metric_strs = [f"{k}={v}" for k, v in self.metrics.items()]
        if exc_type:
            logger.error(f"Task {self.task_name} failed after {duration:.3f}s: {exc_val} | {', '.join(metric_strs)}")
        else:
            logger.debug(f"Task {self.task_name} completed in {duration:.3f}s | {', '.join(metric_strs)}")

        return False  # Don't suppress exceptions

    def increment(self, metric: str, value: int = 1):
        """Increment a metric value."""
        if metric in self.metrics:
            self.metrics[metric] += value
        else:
            self.metrics[metric] = value

    def set(self, metric: str, value: Any):
        """Set a metric value."""
        self.metrics[metric] = value


class PeriodicTask:
    """
    Runs an async tick every `interval` seconds on its own asyncio task.

    Ticks never overlap: a slow tick delays the next one and any ticks that
    fell due meanwhile are dropped. An exception in a tick is logged and the
    loop carries on.
    """

    def __init__(self, name: str, interval: float, tick: Callable[[], Awaitable[None]]):
        if interval <= 0:
            raise ValueError(f"Interval for {name} must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self._tick = tick
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info(f"Started periodic task {self.name} every {self.interval:g}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"Stopped periodic task {self.name}")

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_run = loop.time() + self.interval
        while True:
            await asyncio.sleep(max(0.0, next_run - loop.time()))
            self.ticks += 1
            try:
                await self._tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in periodic task {self.name}: {e}", exc_info=True)
            next_run += self.interval
            now = loop.time()
            if next_run <= now:
                skipped = int((now - next_run) // self.interval) + 1
                logger.debug(f"Periodic task {self.name} skipped {skipped} tick(s)")
                next_run += skipped * self.interval
