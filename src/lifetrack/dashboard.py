"""Dashboard controller.

Wires the tracking and analytics components together and owns the
lifetime of the periodic timers and the API client.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from .activities import ActivitySession, ActivityTracker, Productivity
from .api import (
    ActivityApiClient,
    ApiError,
    DashboardAggregator,
    DashboardSnapshot,
    ResultCache,
)
from .categories import Category, category_info
from .config import LifetrackConfig
from .digest import (
    ProductivityDailyRecord,
    ProductivityHistory,
    StreakRecord,
    StreakTracker,
    next_milestone,
)
from .events import EventBus
from .goals import DailyGoal, GoalTracker
from .notifications import NotificationCenter, NotificationStore
from .scheduler import AsyncioScheduler, CancellationToken, Scheduler

logger = logging.getLogger(__name__)


def session_productivity_score(sessions: list[ActivitySession]) -> int:
    """Duration-weighted productivity score of finalized sessions (0 if none)."""
    total_seconds = sum(s.duration_seconds for s in sessions)
    if total_seconds <= 0:
        return 0
    weighted = sum(s.productivity.score * s.duration_seconds for s in sessions)
    return round(weighted / total_seconds)


class Dashboard:
    """Application controller for one dashboard session.

    Example:
        async with Dashboard(load_config()) as dashboard:
            await dashboard.start_tracking("work")
    """

    def __init__(
        self,
        config: LifetrackConfig | None = None,
        client: ActivityApiClient | None = None,
        scheduler: Scheduler | None = None,
        today: Callable[[], date] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize dashboard.

        Args:
            config: Application configuration (defaults if omitted)
            client: API client (built from config if omitted)
            scheduler: Timer source (asyncio-backed if omitted)
            today: Returns the current calendar day
            clock: Returns the current time for session timestamps
        """
        self._config = config or LifetrackConfig()
        self._today = today or date.today
        self._scheduler = scheduler or AsyncioScheduler()

        self.events = EventBus()
        self.goals = GoalTracker(self._config.goals.targets, self.events)
        self.tracker = ActivityTracker(
            self.goals,
            self._scheduler,
            clock=clock,
            tick_seconds=self._config.scheduler.session_tick_seconds,
        )
        self.streaks = StreakTracker(self.events)
        self.history = ProductivityHistory()

        api = self._config.api
        self._client = client or ActivityApiClient(api.base_url, api.timeout_seconds)
        self.aggregator = DashboardAggregator.for_client(
            self._client,
            recent_limit=api.recent_sessions_limit,
            cache=ResultCache(self._config.cache.ttl_seconds),
            timeout=api.timeout_seconds,
        )

        notifications = self._config.notifications
        self.notifications = NotificationCenter(
            NotificationStore(notifications.storage_path, notifications.history_limit)
        )
        if notifications.enabled:
            self.notifications.attach(self.events)

        self._refresh_token: CancellationToken | None = None
        self._opened = False
        self._closed = False

    @property
    def config(self) -> LifetrackConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    async def __aenter__(self) -> "Dashboard":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def open(self) -> DashboardSnapshot | None:
        """Arm auto-refresh (if enabled) and perform the initial refresh."""
        if self._closed:
            raise RuntimeError("Dashboard is closed")
        if self._opened:
            return self.aggregator.latest

        self._opened = True
        self.streaks.refresh(self._today())

        scheduler_config = self._config.scheduler
        if scheduler_config.auto_refresh:
            self._refresh_token = self._scheduler.schedule(
                scheduler_config.refresh_interval_seconds, self.refresh
            )
            logger.debug(
                f"Auto-refresh armed every {scheduler_config.refresh_interval_seconds}s"
            )

        return await self.refresh()

    async def close(self) -> None:
        """Finalize tracking, cancel every timer, and close the API client."""
        if self._closed:
            return
        self._closed = True

        finished = self.tracker.shutdown()
        if finished is not None:
            logger.info(f"Finalized active session {finished.id} on close")

        if self._refresh_token is not None:
            self._refresh_token.cancel()
            self._refresh_token = None
        # Cancelled refreshes must unwind before the client goes away
        await self._scheduler.aclose()
        await self.aggregator.cancel_pending()
        self.notifications.detach()
        await self._client.aclose()
        logger.info("Dashboard closed")

    async def refresh(self) -> DashboardSnapshot | None:
        """Refresh remote data; see DashboardAggregator.refresh()."""
        return await self.aggregator.refresh()

    async def start_tracking(self, category: Category | str) -> ActivitySession:
        """Start a local session, then mirror it to the monitor if configured.

        Raises:
            AlreadyTrackingError: If a session is already active
            UnknownCategoryError: If the category is not known
        """
        session = self.tracker.start(category)

        if self._config.api.mirror_monitor:
            try:
                await self.aggregator.start_monitor()
            except ApiError as e:
                logger.warning(f"Could not start remote monitor: {e}")

        return session

    async def stop_tracking(
        self, productivity: Productivity | str | None = None
    ) -> ActivitySession:
        """Stop the local session, then mirror it to the monitor if configured.

        Raises:
            NotTrackingError: If no session is active
        """
        session = self.tracker.stop(productivity)

        if self._config.api.mirror_monitor:
            try:
                await self.aggregator.stop_monitor()
            except ApiError as e:
                logger.warning(f"Could not stop remote monitor: {e}")
            await self.aggregator.learn_from_session(session.to_dict())

        return session

    def set_goal_target(self, category: Category | str, target_minutes: int) -> DailyGoal:
        return self.goals.set_target(category, target_minutes)

    def reset_goals(self) -> None:
        self.goals.reset_all()

    def close_day(
        self, day: date | None = None, productivity_score: int | None = None
    ) -> ProductivityDailyRecord:
        """Record the day's productivity and update streaks.

        Goals are not reset; call reset_goals() to start a new day.

        Args:
            day: Day being closed (defaults to today)
            productivity_score: Score override, otherwise derived from the
                day's finalized sessions

        Returns:
            The appended ProductivityDailyRecord

        Raises:
            ValueError: If the day is not after the last recorded day
        """
        day = day or self._today()
        snapshot = self.goals.snapshot()

        if productivity_score is None:
            productivity_score = session_productivity_score(self.tracker.today_sessions(day))

        record = ProductivityDailyRecord(
            day=day,
            total_minutes=sum(g.current_minutes for g in snapshot),
            productivity_score=productivity_score,
            goals_completed=self.goals.completed_count,
            category_minutes={g.category: g.current_minutes for g in snapshot},
        )
        self.history.append(record)

        if self.goals.all_completed:
            self.streaks.record_achievement(day, self._today())
        else:
            self.streaks.refresh(self._today())

        logger.info(
            f"Closed {day.isoformat()}: {record.total_minutes:.1f} min, "
            f"score {record.productivity_score}, "
            f"{record.goals_completed}/{len(snapshot)} goals"
        )
        return record

    def summary(self) -> dict[str, Any]:
        """Plain dict view of the dashboard state."""
        streak: StreakRecord = self.streaks.record
        upcoming = next_milestone(streak.current_streak)
        trend = self.history.trend()
        latest = self.aggregator.latest
        active = self.tracker.active_session

        return {
            "tracking": {
                "state": self.tracker.state.value,
                "category": active.category.value if active else None,
                "elapsed_seconds": self.tracker.elapsed_seconds,
            },
            "goals": [
                {
                    **goal.to_dict(),
                    "label": category_info(goal.category).label,
                    "progress": round(goal.progress_percent, 1),
                }
                for goal in self.goals.snapshot()
            ],
            "streak": {
                **streak.to_dict(),
                "next_milestone": upcoming.count if upcoming else None,
            },
            "trend": trend.to_dict() if trend else None,
            "average_productivity": self.history.average_productivity(),
            "snapshot": latest.to_dict() if latest is not None else None,
        }


__all__ = ["Dashboard", "session_productivity_score"]
