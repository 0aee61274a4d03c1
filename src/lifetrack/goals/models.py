"""Data models for daily goals.

Defines the DailyGoal value object.
"""

from dataclasses import dataclass, replace
from typing import Any

from lifetrack.categories import Category


@dataclass(frozen=True)
class DailyGoal:
    """Daily time target for one category.

    Attributes:
        category: Category the goal tracks
        target_minutes: Daily target in whole minutes
        current_minutes: Minutes accumulated today (may be fractional)
        completed: True iff current_minutes >= target_minutes
    """

    category: Category
    target_minutes: int
    current_minutes: float = 0.0
    completed: bool = False

    @classmethod
    def create(cls, category: Category, target_minutes: int, current_minutes: float = 0.0) -> "DailyGoal":
        """Build a goal with the completed flag derived from its values."""
        return cls(
            category=category,
            target_minutes=target_minutes,
            current_minutes=current_minutes,
            completed=current_minutes >= target_minutes,
        )

    def with_current(self, current_minutes: float) -> "DailyGoal":
        """Copy with new progress and a recomputed completed flag."""
        return replace(
            self,
            current_minutes=current_minutes,
            completed=current_minutes >= self.target_minutes,
        )

    def with_target(self, target_minutes: int) -> "DailyGoal":
        """Copy with a new target and a recomputed completed flag."""
        return replace(
            self,
            target_minutes=target_minutes,
            completed=self.current_minutes >= target_minutes,
        )

    @property
    def progress_percent(self) -> float:
        """Progress towards the target, capped at 100."""
        if self.target_minutes <= 0:
            return 100.0
        return min(self.current_minutes / self.target_minutes * 100, 100.0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "category": self.category.value,
            "target_minutes": self.target_minutes,
            "current_minutes": self.current_minutes,
            "completed": self.completed,
        }


__all__ = ["DailyGoal"]
