"""Data models for notifications.

Defines notification records and the user's notification preferences.
"""

import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class NotificationType(Enum):
    """Kind of event a notification reports."""

    GOAL_COMPLETED = "goal_completed"
    GOALS_RESET = "goals_reset"
    STREAK_MILESTONE = "streak_milestone"


@dataclass(frozen=True)
class Notification:
    """A formatted, user-facing notification.

    Attributes:
        type: Kind of event
        title: Short headline
        message: Body text
        id: Notification identifier
        timestamp: When the notification was created
    """

    type: NotificationType
    title: str
    message: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Notification":
        """Create from a dictionary produced by to_dict().

        Raises:
            KeyError: If a required field is missing
            ValueError: If the type or timestamp is invalid
        """
        return cls(
            id=data["id"],
            type=NotificationType(data["type"]),
            title=data["title"],
            message=data["message"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class NotificationPreferences:
    """Flat set of notification toggles. All enabled by default."""

    enable_notifications: bool = True
    enable_sounds: bool = True
    enable_celebrations: bool = True
    enable_push_notifications: bool = True
    goal_notifications: bool = True
    streak_notifications: bool = True

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotificationPreferences":
        """Create from a dictionary, ignoring unknown or non-boolean entries."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and isinstance(v, bool)})

    def allows(self, notification_type: NotificationType) -> bool:
        """Check whether notifications of this type should be shown."""
        if not self.enable_notifications:
            return False
        if notification_type is NotificationType.STREAK_MILESTONE:
            return self.streak_notifications
        return self.goal_notifications


__all__ = ["Notification", "NotificationPreferences", "NotificationType"]
