"""Streak calculation over goal achievement dates.

A streak counts consecutive calendar days on which every daily goal
was achieved. The current streak survives a one-day grace period so a
day still in progress does not break it.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from lifetrack.api.errors import ValidationError
from lifetrack.events import EventBus, StreakMilestoneReached

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakMilestone:
    """A named streak length worth celebrating."""

    count: int
    name: str
    description: str


STREAK_MILESTONES: tuple[StreakMilestone, ...] = (
    StreakMilestone(3, "Consistent Beginner", "3 consecutive days"),
    StreakMilestone(7, "Strong Week", "A full week"),
    StreakMilestone(14, "Truly Dedicated", "Two consecutive weeks"),
    StreakMilestone(21, "Habit Formed", "Three weeks, habit consolidated"),
    StreakMilestone(30, "Master of the Month", "A whole month"),
    StreakMilestone(50, "Exemplary Dedication", "Fifty consecutive days"),
    StreakMilestone(75, "Consistency Legend", "More than two months"),
    StreakMilestone(100, "Centurion", "A hundred epic days"),
    StreakMilestone(200, "Immortal", "Two hundred legendary days"),
    StreakMilestone(365, "Yearly Legend", "A full year!"),
)


@dataclass(frozen=True)
class StreakRecord:
    """Derived streak statistics.

    Attributes:
        dates: Unique achievement dates, ascending
        current_streak: Run length ending today or yesterday, else 0
        longest_streak: Longest run of consecutive dates
        last_achievement: Most recent achievement date, if any
    """

    dates: tuple[date, ...] = ()
    current_streak: int = 0
    longest_streak: int = 0
    last_achievement: date | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "dates": [d.isoformat() for d in self.dates],
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_achievement": (
                self.last_achievement.isoformat() if self.last_achievement else None
            ),
        }


def parse_day(value: date | str) -> date:
    """Coerce a date, datetime, or ISO ``YYYY-MM-DD`` string to a date.

    Raises:
        ValidationError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value!r}") from e
    raise ValidationError(f"Invalid date: {value!r}")


def _unique_days(values: Iterable[date | str]) -> list[date]:
    days: set[date] = set()
    for value in values:
        try:
            days.add(parse_day(value))
        except ValidationError as e:
            logger.warning(f"Skipping achievement date: {e}")
    return sorted(days)


def calculate_streaks(dates: Iterable[date | str], today: date) -> StreakRecord:
    """Compute current and longest streaks from achievement dates.

    Args:
        dates: Achievement dates; duplicates and invalid entries are dropped
        today: Reference day for the grace period

    Returns:
        StreakRecord with both streak counts
    """
    days = _unique_days(dates)
    if not days:
        return StreakRecord()

    run_length = 1
    longest = 1
    for previous, current in zip(days, days[1:]):
        if current - previous == timedelta(days=1):
            run_length += 1
        else:
            run_length = 1
        longest = max(longest, run_length)

    last = days[-1]
    # Yesterday still counts while today is in progress
    current_streak = run_length if (today - last).days in (0, 1) else 0

    return StreakRecord(
        dates=tuple(days),
        current_streak=current_streak,
        longest_streak=longest,
        last_achievement=last,
    )


def next_milestone(count: int) -> StreakMilestone | None:
    """Return the first milestone strictly above the given streak count."""
    for milestone in STREAK_MILESTONES:
        if milestone.count > count:
            return milestone
    return None


def crossed_milestone(previous: int, current: int) -> StreakMilestone | None:
    """Return the highest milestone in the half-open range (previous, current]."""
    reached = [m for m in STREAK_MILESTONES if previous < m.count <= current]
    return reached[-1] if reached else None


class StreakTracker:
    """Holds achievement dates and announces streak milestones.

    Each recalculation compares the new current streak to the previous
    one; when it grew past a milestone, StreakMilestoneReached is
    published once.
    """

    def __init__(
        self,
        event_bus: EventBus | None = None,
        dates: Iterable[date | str] = (),
        today: date | None = None,
    ) -> None:
        """Initialize tracker.

        Args:
            event_bus: Receives milestone events
            dates: Previously recorded achievement dates
            today: When given, the baseline streak is computed silently
        """
        self._bus = event_bus
        self._dates: set[date] = set(_unique_days(dates))
        self._record = calculate_streaks(self._dates, today) if today else StreakRecord()

    @property
    def record(self) -> StreakRecord:
        """Most recently computed streak record."""
        return self._record

    @property
    def current_streak(self) -> int:
        return self._record.current_streak

    @property
    def longest_streak(self) -> int:
        return self._record.longest_streak

    def is_streak_date(self, day: date | str) -> bool:
        """Check whether all goals were achieved on the given day."""
        try:
            return parse_day(day) in self._dates
        except ValidationError:
            return False

    def record_achievement(self, day: date | str, today: date | None = None) -> StreakRecord:
        """Add an achievement date and recalculate.

        Args:
            day: Day on which all goals were achieved
            today: Reference day (defaults to ``day``)

        Returns:
            The updated streak record

        Raises:
            ValidationError: If ``day`` is not a valid date
        """
        achieved = parse_day(day)
        self._dates.add(achieved)
        return self.refresh(today or achieved)

    def refresh(self, today: date) -> StreakRecord:
        """Recalculate streaks relative to ``today``."""
        previous = self._record.current_streak
        self._record = calculate_streaks(self._dates, today)
        current = self._record.current_streak

        if current > previous:
            milestone = crossed_milestone(previous, current)
            if milestone is not None:
                logger.info(f"Streak milestone reached: {milestone.count} days ({milestone.name})")
                if self._bus is not None:
                    self._bus.publish(
                        StreakMilestoneReached(count=milestone.count, name=milestone.name)
                    )
        elif current < previous:
            logger.info(f"Streak lapsed (was {previous} days)")

        return self._record


__all__ = [
    "STREAK_MILESTONES",
    "StreakMilestone",
    "StreakRecord",
    "StreakTracker",
    "calculate_streaks",
    "crossed_milestone",
    "next_milestone",
    "parse_day",
]
