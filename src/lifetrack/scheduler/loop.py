"""Asyncio-backed scheduler.

Each schedule is a task that sleeps, ticks, and awaits the tick before
sleeping again.
"""

import asyncio
import inspect
import logging

from .base import CancellationToken, TickCallback

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """Scheduler running periodic callbacks on the running event loop."""

    def __init__(self) -> None:
        self._tasks: dict[CancellationToken, asyncio.Task[None]] = {}

    def schedule(self, interval_seconds: float, callback: TickCallback) -> CancellationToken:
        """Start a periodic schedule.

        Must be called while an event loop is running.

        Args:
            interval_seconds: Seconds between the end of one tick and the next
            callback: Sync or async callable invoked on every tick

        Returns:
            Token that cancels the schedule
        """
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}")

        token = CancellationToken(on_cancel=lambda: self._cancel_task(token))
        task = asyncio.get_running_loop().create_task(self._run(interval_seconds, callback, token))
        self._tasks[token] = task
        return token

    async def _run(
        self, interval_seconds: float, callback: TickCallback, token: CancellationToken
    ) -> None:
        name = getattr(callback, "__qualname__", repr(callback))
        while not token.cancelled:
            await asyncio.sleep(interval_seconds)
            if token.cancelled:
                break
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"Scheduled callback {name} failed: {e}")

    def _cancel_task(self, token: CancellationToken) -> None:
        task = self._tasks.pop(token, None)
        if task is not None and not task.done():
            task.cancel()

    @property
    def active_count(self) -> int:
        """Number of schedules still running."""
        return sum(1 for t in self._tasks.values() if not t.done())

    def shutdown(self) -> None:
        """Cancel every outstanding schedule."""
        for token in list(self._tasks):
            token.cancel()
        logger.debug("Scheduler shut down")

    async def aclose(self) -> None:
        """Cancel every schedule and wait for in-progress ticks to unwind."""
        tasks = list(self._tasks.values())
        self.shutdown()
        current = asyncio.current_task()
        pending = [t for t in tasks if t is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


__all__ = ["AsyncioScheduler"]
