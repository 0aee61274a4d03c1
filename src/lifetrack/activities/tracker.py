"""Session lifecycle management.

Provides start/stop tracking driven by a 1 Hz scheduler tick that feeds
elapsed time into the goal tracker.
"""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from lifetrack.categories import Category
from lifetrack.goals import GoalTracker
from lifetrack.scheduler import CancellationToken, Scheduler

from .errors import AlreadyTrackingError, NotTrackingError
from .models import ActivitySession, Productivity, SessionState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class ActivityTracker:
    """Owns the Idle/Active state of the current tracking session.

    Only one session can be active. Each tick adds one second to the
    active session and 1/60 minute to the matching goal.
    """

    def __init__(
        self,
        goal_tracker: GoalTracker,
        scheduler: Scheduler,
        clock: Clock | None = None,
        tick_seconds: float = 1.0,
    ) -> None:
        """Initialize tracker.

        Args:
            goal_tracker: Receives per-tick minute deltas
            scheduler: Source of session ticks
            clock: Returns the current time (defaults to UTC now)
            tick_seconds: Scheduler interval for session ticks
        """
        self._goals = goal_tracker
        self._scheduler = scheduler
        self._clock = clock or (lambda: datetime.now(UTC))
        self._tick_seconds = tick_seconds

        self._active: ActivitySession | None = None
        self._tick_token: CancellationToken | None = None
        self._history: list[ActivitySession] = []

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return SessionState.ACTIVE if self._active is not None else SessionState.IDLE

    @property
    def is_tracking(self) -> bool:
        """True while a session is active."""
        return self._active is not None

    @property
    def active_session(self) -> ActivitySession | None:
        """The in-progress session, or None when idle."""
        return self._active

    @property
    def elapsed_seconds(self) -> int:
        """Seconds tracked in the active session (0 when idle)."""
        return self._active.duration_seconds if self._active else 0

    @property
    def history(self) -> tuple[ActivitySession, ...]:
        """Finalized sessions, most recent first."""
        return tuple(self._history)

    def start(self, category: Category | str) -> ActivitySession:
        """Start tracking a new session.

        Args:
            category: Category to track time against

        Returns:
            The new active session

        Raises:
            AlreadyTrackingError: If a session is already active
            UnknownCategoryError: If the category is not known
        """
        if self._active is not None:
            raise AlreadyTrackingError(
                f"Already tracking {self._active.category.value} (session {self._active.id})"
            )

        session = ActivitySession(
            category=Category.parse(category),
            start_time=self._clock(),
            duration_seconds=0,
            productivity=Productivity.MEDIUM,
        )
        # Stays idle if the tick cannot be armed
        self._tick_token = self._scheduler.schedule(self._tick_seconds, self.tick)
        self._active = session

        logger.info(f"Started tracking {session.category.value} (session {session.id})")
        return session

    def tick(self) -> None:
        """Advance the active session by one second.

        Raises:
            NotTrackingError: If no session is active
        """
        if self._active is None:
            raise NotTrackingError("Tick received while idle")

        self._active = self._active.advanced(1)
        self._goals.apply_delta(self._active.category, 1 / 60)

    def stop(self, productivity: Productivity | str | None = None) -> ActivitySession:
        """Stop and finalize the active session.

        Args:
            productivity: Optional final productivity tag

        Returns:
            The finalized session, also prepended to history

        Raises:
            NotTrackingError: If no session is active
        """
        if self._active is None:
            raise NotTrackingError("No active session to stop")

        self._disarm()
        tag = Productivity(productivity) if isinstance(productivity, str) else productivity
        finished = self._active.finalized(self._clock(), tag)
        self._history.insert(0, finished)
        self._active = None

        logger.info(
            f"Stopped tracking {finished.category.value} "
            f"({finished.duration_seconds}s, session {finished.id})"
        )
        return finished

    def shutdown(self) -> ActivitySession | None:
        """Finalize any active session and release its tick schedule."""
        if self._active is None:
            self._disarm()
            return None
        return self.stop()

    def today_sessions(self, day: date | None = None) -> list[ActivitySession]:
        """Finalized sessions that started on the given day, most recent first."""
        day = day or self._clock().date()
        return [s for s in self._history if s.start_time.date() == day]

    def _disarm(self) -> None:
        if self._tick_token is not None:
            self._tick_token.cancel()
            self._tick_token = None


__all__ = ["ActivityTracker"]
