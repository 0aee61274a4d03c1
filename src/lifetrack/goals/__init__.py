"""Goals module for Lifetrack.

Provides per-category daily goals and progress tracking.
"""

from .models import DailyGoal
from .tracker import GoalTracker

__all__ = [
    "DailyGoal",
    "GoalTracker",
]
