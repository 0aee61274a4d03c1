"""Data models for activity tracking.

Defines the ActivitySession entity and its status enums.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from lifetrack.categories import Category


class Productivity(Enum):
    """Qualitative productivity tag of a session."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def score(self) -> int:
        """Numeric weight (0-100) used for daily productivity scores."""
        return _PRODUCTIVITY_SCORES[self]


_PRODUCTIVITY_SCORES = {
    Productivity.HIGH: 100,
    Productivity.MEDIUM: 60,
    Productivity.LOW: 20,
}


class SessionState(Enum):
    """Whether a session is currently being tracked."""

    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class ActivitySession:
    """One contiguous interval of tracked time in a single category.

    Attributes:
        category: Category the time is spent on
        start_time: When tracking started
        id: Session identifier
        end_time: When tracking stopped (None while active)
        duration_seconds: Elapsed tracked seconds
        productivity: Qualitative productivity tag
    """

    category: Category
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    end_time: datetime | None = None
    duration_seconds: int = 0
    productivity: Productivity = Productivity.MEDIUM

    @property
    def is_finalized(self) -> bool:
        """True once the session has an end time."""
        return self.end_time is not None

    @property
    def duration_minutes(self) -> float:
        """Duration in (fractional) minutes."""
        return self.duration_seconds / 60

    def advanced(self, seconds: int = 1) -> "ActivitySession":
        """Copy with the duration extended by the given seconds."""
        if self.is_finalized:
            raise ValueError(f"Session {self.id} is already finalized")
        return replace(self, duration_seconds=self.duration_seconds + seconds)

    def finalized(
        self, end_time: datetime, productivity: Productivity | None = None
    ) -> "ActivitySession":
        """Copy with end time set and duration frozen.

        Raises:
            ValueError: If the session was already finalized
        """
        if self.is_finalized:
            raise ValueError(f"Session {self.id} is already finalized")
        return replace(
            self,
            end_time=max(end_time, self.start_time),
            productivity=productivity or self.productivity,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "category": self.category.value,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": self.duration_seconds,
            "productivity": self.productivity.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivitySession":
        """Create from a dictionary produced by to_dict()."""
        start_time = datetime.fromisoformat(data["start_time"])
        end_time = datetime.fromisoformat(data["end_time"]) if data.get("end_time") else None

        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=UTC)
        if end_time and end_time.tzinfo is None:
            end_time = end_time.replace(tzinfo=UTC)

        return cls(
            id=data.get("id") or uuid.uuid4().hex,
            category=Category.parse(data["category"]),
            start_time=start_time,
            end_time=end_time,
            duration_seconds=int(data.get("duration_seconds", 0)),
            productivity=Productivity(data.get("productivity", "medium")),
        )


__all__ = ["ActivitySession", "Category", "Productivity", "SessionState"]
