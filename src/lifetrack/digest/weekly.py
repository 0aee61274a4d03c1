"""Weekly goal and productivity summaries.

Provides week-over-week comparisons of remote productivity statistics
and completion averages over weekly goal history.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeeklyGoalHistory:
    """Goal completion totals for one week."""

    week: str
    goals_completed: int
    total_goals: int

    @property
    def completion_rate(self) -> int:
        """Completed share of goals as a rounded percentage."""
        if self.total_goals <= 0:
            return 0
        return round(self.goals_completed / self.total_goals * 100)


@dataclass(frozen=True)
class WeekComparison:
    """Differences between the current and previous week (current minus previous)."""

    time_difference: float
    productivity_difference: float
    sessions_difference: int

    def to_dict(self) -> dict[str, float | int]:
        return {
            "time_difference": self.time_difference,
            "productivity_difference": self.productivity_difference,
            "sessions_difference": self.sessions_difference,
        }


@dataclass
class WeeklySummary:
    """Productivity statistics for two consecutive weeks."""

    current_week: Mapping[str, Any]
    previous_week: Mapping[str, Any]
    comparison: WeekComparison


class ProductivityStatsSource(Protocol):
    """Protocol for fetching productivity statistics over a time range."""

    async def get_productivity_stats(
        self,
        period: str = "today",
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[str, Any]:
        """Get productivity stats for a period."""
        ...


def weekly_completion_average(history: Sequence[WeeklyGoalHistory]) -> int:
    """Mean completion rate across weeks, rounded (0 for no history)."""
    if not history:
        return 0
    return round(sum(week.completion_rate for week in history) / len(history))


def _number(stats: Mapping[str, Any], key: str) -> float:
    value = stats.get(key, 0)
    return value if isinstance(value, int | float) else 0


def compare_weeks(current: Mapping[str, Any], previous: Mapping[str, Any]) -> WeekComparison:
    """Compare two productivity-stats payloads.

    Missing or non-numeric fields count as zero.
    """
    return WeekComparison(
        time_difference=_number(current, "totalTimeHours") - _number(previous, "totalTimeHours"),
        productivity_difference=(
            _number(current, "averageProductivity") - _number(previous, "averageProductivity")
        ),
        sessions_difference=int(
            _number(current, "sessionCount") - _number(previous, "sessionCount")
        ),
    )


def week_bounds(reference: date) -> tuple[datetime, datetime]:
    """Return the start and end of the Monday-to-Sunday week containing ``reference``."""
    week_start = reference - timedelta(days=reference.weekday())
    week_end = week_start + timedelta(days=6)
    return datetime.combine(week_start, time.min), datetime.combine(week_end, time.max)


async def fetch_weekly_summary(
    source: ProductivityStatsSource, reference: date | None = None
) -> WeeklySummary:
    """Fetch this week's and last week's stats concurrently and compare them.

    Args:
        source: Client exposing get_productivity_stats
        reference: Any date within the current week (defaults to today)

    Returns:
        WeeklySummary with both payloads and their comparison
    """
    reference = reference or date.today()
    start, end = week_bounds(reference)
    previous_start, previous_end = start - timedelta(days=7), end - timedelta(days=7)

    current, previous = await asyncio.gather(
        source.get_productivity_stats("custom", start, end),
        source.get_productivity_stats("custom", previous_start, previous_end),
    )
    comparison = compare_weeks(current, previous)
    logger.debug(f"Weekly comparison for {start.date().isoformat()}: {comparison}")
    return WeeklySummary(current_week=current, previous_week=previous, comparison=comparison)


__all__ = [
    "ProductivityStatsSource",
    "WeekComparison",
    "WeeklyGoalHistory",
    "WeeklySummary",
    "compare_weeks",
    "fetch_weekly_summary",
    "week_bounds",
    "weekly_completion_average",
]
