"""Digest module for Lifetrack.

Provides streak, productivity trend, and weekly summary analytics.
"""

from .history import (
    ProductivityDailyRecord,
    ProductivityHistory,
    calculate_productivity_score,
)
from .streaks import (
    STREAK_MILESTONES,
    StreakMilestone,
    StreakRecord,
    StreakTracker,
    calculate_streaks,
    next_milestone,
    parse_day,
)
from .trends import Trend, TrendResult, analyze_trend
from .weekly import (
    WeekComparison,
    WeeklyGoalHistory,
    WeeklySummary,
    compare_weeks,
    fetch_weekly_summary,
    week_bounds,
    weekly_completion_average,
)

__all__ = [
    "STREAK_MILESTONES",
    "ProductivityDailyRecord",
    "ProductivityHistory",
    "StreakMilestone",
    "StreakRecord",
    "StreakTracker",
    "Trend",
    "TrendResult",
    "WeekComparison",
    "WeeklyGoalHistory",
    "WeeklySummary",
    "analyze_trend",
    "calculate_productivity_score",
    "calculate_streaks",
    "compare_weeks",
    "fetch_weekly_summary",
    "next_milestone",
    "parse_day",
    "week_bounds",
    "weekly_completion_average",
]
