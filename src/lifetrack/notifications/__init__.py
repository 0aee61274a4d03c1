"""Notifications module for Lifetrack.

Provides event-driven notifications with persisted preferences and
history.
"""

from .center import NotificationCenter, NotificationDispatcher, format_event
from .errors import NonCriticalSideEffectError
from .models import Notification, NotificationPreferences, NotificationType
from .storage import DEFAULT_HISTORY_LIMIT, NotificationStore

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "NonCriticalSideEffectError",
    "Notification",
    "NotificationCenter",
    "NotificationDispatcher",
    "NotificationPreferences",
    "NotificationStore",
    "NotificationType",
    "format_event",
]
