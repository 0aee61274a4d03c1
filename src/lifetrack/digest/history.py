"""Daily productivity records.

Keeps an append-only, chronological history of per-day productivity
and derives aggregate statistics from it.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any

from lifetrack.categories import Category

from .trends import TrendResult, analyze_trend

logger = logging.getLogger(__name__)

HIGH_PRODUCTIVITY_THRESHOLD = 70


@dataclass(frozen=True)
class ProductivityDailyRecord:
    """Productivity summary for one calendar day.

    Attributes:
        day: Calendar date
        total_minutes: Total tracked minutes
        productivity_score: Aggregate score (0-100)
        goals_completed: Number of goals completed that day
        category_minutes: Minutes tracked per category
    """

    day: date
    total_minutes: float
    productivity_score: int
    goals_completed: int = 0
    category_minutes: Mapping[Category, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0 <= self.productivity_score <= 100:
            raise ValueError(f"Productivity score out of range: {self.productivity_score}")
        if self.total_minutes < 0:
            raise ValueError(f"Total minutes must be non-negative: {self.total_minutes}")
        object.__setattr__(
            self, "category_minutes", MappingProxyType(dict(self.category_minutes))
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "date": self.day.isoformat(),
            "total_minutes": self.total_minutes,
            "productivity_score": self.productivity_score,
            "goals_completed": self.goals_completed,
            "category_minutes": {c.value: m for c, m in self.category_minutes.items()},
        }


def calculate_productivity_score(scores: Sequence[float]) -> int:
    """Combine session scores into one 0-100 productivity score.

    Weighted 70% on the mean score and 30% on the share of sessions
    scoring at least 70.

    Args:
        scores: Per-session productivity scores

    Returns:
        Rounded score, 0 for no sessions
    """
    if not scores:
        return 0

    average = sum(scores) / len(scores)
    high_share = sum(1 for s in scores if s >= HIGH_PRODUCTIVITY_THRESHOLD) / len(scores)
    raw = average * 0.7 + high_share * 100 * 0.3
    # Halves round up
    return int(min(max(raw, 0.0), 100.0) + 0.5)


class ProductivityHistory:
    """Append-only chronological sequence of daily productivity records."""

    def __init__(self, records: Iterable[ProductivityDailyRecord] = ()) -> None:
        self._records: list[ProductivityDailyRecord] = []
        for record in records:
            self.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    @property
    def records(self) -> tuple[ProductivityDailyRecord, ...]:
        return tuple(self._records)

    def latest(self) -> ProductivityDailyRecord | None:
        return self._records[-1] if self._records else None

    def get(self, day: date) -> ProductivityDailyRecord | None:
        for record in self._records:
            if record.day == day:
                return record
        return None

    def append(self, record: ProductivityDailyRecord) -> None:
        """Append the record for the next day.

        Raises:
            ValueError: If the date is not after the latest recorded date
        """
        latest = self.latest()
        if latest is not None and record.day <= latest.day:
            raise ValueError(
                f"Record for {record.day.isoformat()} must come after "
                f"{latest.day.isoformat()}"
            )
        self._records.append(record)
        logger.debug(
            f"Recorded productivity {record.productivity_score} for {record.day.isoformat()}"
        )

    def scores(self) -> list[int]:
        """Productivity scores, oldest first."""
        return [r.productivity_score for r in self._records]

    def trend(self) -> TrendResult | None:
        """Trend over the last week, or None with no history."""
        scores = self.scores()
        return analyze_trend(scores) if scores else None

    def average_productivity(self, days: int = 7) -> float:
        """Mean score over the most recent ``days`` records (0 when empty)."""
        if days <= 0:
            raise ValueError(f"days must be positive: {days}")
        recent = self._records[-days:]
        if not recent:
            return 0.0
        return sum(r.productivity_score for r in recent) / len(recent)

    def category_totals(self) -> dict[Category, float]:
        """Minutes per category across the whole history."""
        totals: dict[Category, float] = {}
        for record in self._records:
            for category, minutes in record.category_minutes.items():
                totals[category] = totals.get(category, 0.0) + minutes
        return totals


__all__ = [
    "ProductivityDailyRecord",
    "ProductivityHistory",
    "calculate_productivity_score",
]
