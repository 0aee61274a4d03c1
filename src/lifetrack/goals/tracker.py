"""Goal progress tracking.

Owns the per-category DailyGoal set. All mutation goes through
apply_delta(), set_target() and reset_all().
"""

import logging
from collections.abc import Mapping

from lifetrack.categories import Category, UnknownCategoryError
from lifetrack.events import EventBus, GoalCompleted, GoalsReset

from .models import DailyGoal

logger = logging.getLogger(__name__)


def _validate_target(target_minutes: object) -> int:
    if isinstance(target_minutes, bool) or not isinstance(target_minutes, int):
        raise ValueError(f"Target must be a whole number of minutes, got {target_minutes!r}")
    if target_minutes < 0:
        raise ValueError(f"Target must be non-negative, got {target_minutes}")
    return target_minutes


class GoalTracker:
    """Tracks daily progress against per-category targets.

    Publishes GoalCompleted when accumulated time first reaches a target
    and GoalsReset when all progress is cleared.
    """

    def __init__(
        self,
        targets: Mapping[Category | str, int] | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize tracker.

        Args:
            targets: Daily target minutes per category
            event_bus: Bus receiving goal events (a private bus if omitted)

        Raises:
            UnknownCategoryError: If a target key names no category
            ValueError: If a target is not a non-negative integer
        """
        self._bus = event_bus or EventBus()
        self._goals: dict[Category, DailyGoal] = {}
        # Categories already announced since the last reset
        self._announced: set[Category] = set()

        for key, minutes in (targets or {}).items():
            category = Category.parse(key)
            self._goals[category] = DailyGoal.create(category, _validate_target(minutes))

    @property
    def event_bus(self) -> EventBus:
        """Bus that receives this tracker's events."""
        return self._bus

    def apply_delta(self, category: Category | str, minutes_delta: float) -> DailyGoal | None:
        """Add tracked minutes to a category's goal.

        Categories without a goal (or unknown names) are ignored.

        Args:
            category: Category the time was spent on
            minutes_delta: Minutes to add, may be fractional

        Returns:
            The updated goal, or None if the category has no goal

        Raises:
            ValueError: If minutes_delta is negative
        """
        if minutes_delta < 0:
            raise ValueError(f"Progress cannot decrease, got delta {minutes_delta}")

        try:
            key = Category.parse(category)
        except UnknownCategoryError:
            logger.debug(f"Ignoring delta for unknown category {category!r}")
            return None

        goal = self._goals.get(key)
        if goal is None:
            logger.debug(f"Ignoring delta for category without goal: {key.value}")
            return None

        updated = goal.with_current(goal.current_minutes + minutes_delta)
        self._goals[key] = updated

        if updated.completed and not goal.completed and key not in self._announced:
            self._announced.add(key)
            logger.info(f"Goal completed: {key.value} ({updated.target_minutes} min)")
            self._bus.publish(GoalCompleted(category=key, target_minutes=updated.target_minutes))

        return updated

    def set_target(self, category: Category | str, target_minutes: int) -> DailyGoal:
        """Replace a category's target and recompute completion.

        A lowered target that is already satisfied marks the goal
        complete without publishing GoalCompleted.

        Raises:
            UnknownCategoryError: If the category is not known
            ValueError: If target_minutes is not a non-negative integer
        """
        key = Category.parse(category)
        target = _validate_target(target_minutes)

        goal = self._goals.get(key)
        if goal is None:
            updated = DailyGoal.create(key, target)
            logger.info(f"Goal added: {key.value} ({target} min)")
        else:
            updated = goal.with_target(target)
            if updated.completed and not goal.completed:
                logger.info(f"Goal {key.value} satisfied by lowered target ({target} min)")

        self._goals[key] = updated
        return updated

    def reset_all(self) -> None:
        """Clear progress on every goal and publish GoalsReset."""
        self._goals = {key: goal.with_current(0.0) for key, goal in self._goals.items()}
        self._announced.clear()
        logger.info("All goals reset")
        self._bus.publish(GoalsReset())

    def snapshot(self) -> tuple[DailyGoal, ...]:
        """Immutable view of all goals in category order."""
        return tuple(self._goals[c] for c in Category if c in self._goals)

    def get(self, category: Category | str) -> DailyGoal | None:
        """Goal for a category, or None if it has none."""
        return self._goals.get(Category.parse(category))

    def progress(self, category: Category | str) -> float:
        """Progress percent for a category (0 when it has no goal)."""
        goal = self.get(category)
        return goal.progress_percent if goal else 0.0

    @property
    def completed_count(self) -> int:
        """Number of completed goals."""
        return sum(1 for g in self._goals.values() if g.completed)

    @property
    def all_completed(self) -> bool:
        """True when there is at least one goal and every goal is complete."""
        return bool(self._goals) and all(g.completed for g in self._goals.values())

    @property
    def total_minutes(self) -> float:
        """Minutes accumulated across all goals today."""
        return sum(g.current_minutes for g in self._goals.values())

    def __len__(self) -> int:
        return len(self._goals)


__all__ = ["GoalTracker"]
