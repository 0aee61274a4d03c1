"""Domain events and in-process event bus.

Events are emitted by the goal and streak trackers and consumed by
notification dispatchers.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TypeVar

from .categories import Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalCompleted:
    """A goal crossed its target for the first time since the last reset."""

    category: Category
    target_minutes: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class GoalsReset:
    """Every goal was reset to zero progress."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class StreakMilestoneReached:
    """The current streak reached a milestone day count."""

    count: int
    name: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


Event = GoalCompleted | GoalsReset | StreakMilestoneReached

E = TypeVar("E")
Handler = Callable[[Any], None]


class EventBus:
    """Synchronous publish/subscribe bus.

    Handlers run in subscription order on the publisher's call stack.
    A failing handler is logged and skipped; it never reaches the publisher.
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = {}

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register a handler for an event type.

        Args:
            event_type: Event class to listen for
            handler: Callable invoked with each published event

        Returns:
            Callable that removes the subscription
        """
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: object) -> None:
        """Deliver an event to every handler subscribed to its type."""
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler(event)
            except Exception as e:
                logger.warning(f"Event handler failed for {type(event).__name__}: {e}")

    def handler_count(self, event_type: type) -> int:
        """Number of handlers subscribed to an event type."""
        return len(self._handlers.get(event_type, []))


__all__ = [
    "Event",
    "EventBus",
    "GoalCompleted",
    "GoalsReset",
    "StreakMilestoneReached",
]
