"""Scheduler protocol and cancellation token.

All periodic behavior (session ticks, auto-refresh) goes through a
Scheduler so that cancellation and time control are uniform.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

TickCallback = Callable[[], Awaitable[None] | None]


class CancellationToken:
    """Handle returned by Scheduler.schedule().

    Cancelling is idempotent. The optional hook lets a scheduler release
    whatever resource backs the schedule (task, heap entry).
    """

    def __init__(self, on_cancel: Callable[[], None] | None = None) -> None:
        self._cancelled = False
        self._on_cancel = on_cancel

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled

    def cancel(self) -> None:
        """Stop any further ticks of the associated schedule."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()


class Scheduler(Protocol):
    """Protocol for periodic tick sources."""

    def schedule(self, interval_seconds: float, callback: TickCallback) -> CancellationToken:
        """Invoke callback every interval_seconds until the token is cancelled.

        A tick runs to completion before the next tick of the same
        schedule is started.
        """
        ...

    def shutdown(self) -> None:
        """Cancel every schedule created by this scheduler."""
        ...

    async def aclose(self) -> None:
        """Cancel every schedule and wait until none is still running."""
        ...


__all__ = ["CancellationToken", "Scheduler", "TickCallback"]
