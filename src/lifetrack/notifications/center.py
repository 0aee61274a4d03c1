"""Notification dispatch for goal and streak events.

Turns domain events into notifications, records them in history, and
fires optional side effects. Side effects are best-effort: a failing
sound, push, or celebration hook is logged and never reaches the
publisher of the event.
"""

import logging
from collections.abc import Callable
from typing import Protocol

from lifetrack.categories import category_info
from lifetrack.events import Event, EventBus, GoalCompleted, GoalsReset, StreakMilestoneReached

from .errors import NonCriticalSideEffectError
from .models import Notification, NotificationPreferences, NotificationType
from .storage import NotificationStore

logger = logging.getLogger(__name__)

SideEffect = Callable[[Notification], None]


class NotificationDispatcher(Protocol):
    """Receives domain events and presents them to the user."""

    def dispatch(self, event: Event) -> Notification | None:
        """Handle one event, returning the notification shown, if any."""
        ...


def format_event(event: Event) -> Notification:
    """Build the user-facing notification for an event."""
    if isinstance(event, GoalCompleted):
        info = category_info(event.category)
        return Notification(
            type=NotificationType.GOAL_COMPLETED,
            title="Goal Completed!",
            message=f"{info.symbol} {info.label}: {event.target_minutes} minute goal reached",
            timestamp=event.timestamp,
        )
    if isinstance(event, GoalsReset):
        return Notification(
            type=NotificationType.GOALS_RESET,
            title="Goals Reset",
            message="All daily goals were reset",
            timestamp=event.timestamp,
        )
    if isinstance(event, StreakMilestoneReached):
        suffix = f" - {event.name}" if event.name else ""
        return Notification(
            type=NotificationType.STREAK_MILESTONE,
            title="Streak Milestone!",
            message=f"{event.count} consecutive days{suffix}",
            timestamp=event.timestamp,
        )
    raise TypeError(f"Unsupported event: {type(event).__name__}")


class NotificationCenter:
    """Default NotificationDispatcher backed by a NotificationStore."""

    def __init__(
        self,
        store: NotificationStore | None = None,
        sound_player: SideEffect | None = None,
        push_sender: SideEffect | None = None,
        celebrate: SideEffect | None = None,
    ) -> None:
        """Initialize notification center.

        Args:
            store: Preference and history storage (in-memory by default)
            sound_player: Plays a sound for a notification
            push_sender: Delivers a push/desktop notification
            celebrate: Runs a celebration effect
        """
        self._store = store or NotificationStore()
        self._sound_player = sound_player
        self._push_sender = push_sender
        self._celebrate = celebrate
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def store(self) -> NotificationStore:
        return self._store

    @property
    def preferences(self) -> NotificationPreferences:
        return self._store.preferences

    def attach(self, bus: EventBus) -> None:
        """Subscribe to every notifiable event on the bus."""
        for event_type in (GoalCompleted, GoalsReset, StreakMilestoneReached):
            self._unsubscribers.append(bus.subscribe(event_type, self.dispatch))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def history(self) -> list[Notification]:
        return self._store.history()

    def dispatch(self, event: Event) -> Notification | None:
        """Format, record, and present an event according to preferences."""
        notification = format_event(event)
        preferences = self._store.preferences

        if not preferences.allows(notification.type):
            logger.debug(f"Notification suppressed by preferences: {notification.type.value}")
            return None

        self._store.add(notification)
        logger.info(f"Notification: {notification.title} {notification.message}")

        if preferences.enable_sounds:
            self._run_side_effect("sound", self._sound_player, notification)
        if preferences.enable_push_notifications:
            self._run_side_effect("push", self._push_sender, notification)
        if preferences.enable_celebrations and notification.type is not NotificationType.GOALS_RESET:
            self._run_side_effect("celebration", self._celebrate, notification)

        return notification

    def _run_side_effect(
        self, name: str, effect: SideEffect | None, notification: Notification
    ) -> None:
        if effect is None:
            return
        try:
            effect(notification)
        except NonCriticalSideEffectError as e:
            logger.warning(f"{name.capitalize()} side effect unavailable: {e}")
        except Exception as e:
            logger.warning(f"{name.capitalize()} side effect failed: {e!r}")


__all__ = ["NotificationCenter", "NotificationDispatcher", "format_event"]
