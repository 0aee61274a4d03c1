"""Virtual-time scheduler for testing.

Time only moves when advance() is called, so tests can fast-forward
hours of ticks instantly and deterministically.
"""

import inspect
from dataclasses import dataclass, field
from itertools import count

from .base import CancellationToken, TickCallback


@dataclass(order=True)
class _Entry:
    due: float
    seq: int
    interval: float = field(compare=False)
    callback: TickCallback = field(compare=False)
    token: CancellationToken = field(compare=False)


class VirtualScheduler:
    """Scheduler driven by an explicit virtual clock."""

    def __init__(self, start: float = 0.0) -> None:
        """Initialize virtual scheduler.

        Args:
            start: Initial virtual time in seconds
        """
        self._now = start
        self._entries: list[_Entry] = []
        self._seq = count()
        self.tick_count = 0

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of live schedules."""
        return sum(1 for e in self._entries if not e.token.cancelled)

    def schedule(self, interval_seconds: float, callback: TickCallback) -> CancellationToken:
        """Register a periodic callback starting one interval from now."""
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}")
        token = CancellationToken()
        self._entries.append(
            _Entry(
                due=self._now + interval_seconds,
                seq=next(self._seq),
                interval=interval_seconds,
                callback=callback,
                token=token,
            )
        )
        return token

    def shutdown(self) -> None:
        """Cancel all schedules."""
        for entry in self._entries:
            entry.token.cancel()
        self._entries.clear()

    async def aclose(self) -> None:
        self.shutdown()

    def _next_due(self, until: float) -> _Entry | None:
        self._entries = [e for e in self._entries if not e.token.cancelled]
        due = [e for e in self._entries if e.due <= until]
        return min(due) if due else None

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing due sync callbacks in time order.

        Returns:
            Number of ticks fired

        Raises:
            TypeError: If a callback returns an awaitable (use advance_async)
        """
        until = self._now + seconds
        fired = 0
        while (entry := self._next_due(until)) is not None:
            self._now = entry.due
            entry.due += entry.interval
            entry.seq = next(self._seq)
            result = entry.callback()
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError("Async callback fired from advance(); use advance_async()")
            fired += 1
        self._now = until
        self.tick_count += fired
        return fired

    async def advance_async(self, seconds: float) -> int:
        """Move virtual time forward, awaiting async callbacks as they fire."""
        until = self._now + seconds
        fired = 0
        while (entry := self._next_due(until)) is not None:
            self._now = entry.due
            entry.due += entry.interval
            entry.seq = next(self._seq)
            result = entry.callback()
            if inspect.isawaitable(result):
                await result
            fired += 1
        self._now = until
        self.tick_count += fired
        return fired


__all__ = ["VirtualScheduler"]
