"""JSON persistence for notification preferences and history."""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from .models import Notification, NotificationPreferences

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class NotificationStore:
    """Stores preferences and a bounded, newest-first notification history.

    Without a path the store is purely in-memory.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """Initialize store.

        Args:
            path: JSON file for persistence. If None, nothing is persisted.
            history_limit: Maximum number of notifications kept
        """
        if history_limit < 1:
            raise ValueError(f"history_limit must be at least 1: {history_limit}")

        self._path: Path | None = Path(path).expanduser() if path else None
        self._limit = history_limit
        self._preferences = NotificationPreferences()
        self._history: list[Notification] = []

        if self._path:
            self._load()

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def preferences(self) -> NotificationPreferences:
        """A copy of the current preferences."""
        return replace(self._preferences)

    def update_preferences(self, **changes: bool) -> NotificationPreferences:
        """Merge the given toggles into the preferences and persist them.

        Raises:
            TypeError: If a toggle name is unknown
        """
        self._preferences = replace(self._preferences, **changes)
        self._save()
        return self.preferences

    def history(self) -> list[Notification]:
        """Notifications, newest first."""
        return list(self._history)

    def add(self, notification: Notification) -> None:
        """Prepend a notification, evicting the oldest beyond the limit."""
        self._history.insert(0, notification)
        del self._history[self._limit :]
        self._save()

    def clear_history(self) -> None:
        self._history.clear()
        self._save()

    def _save(self) -> None:
        """Save preferences and history to the JSON file."""
        if not self._path:
            return

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)

            data = {
                "version": 1,
                "preferences": self._preferences.to_dict(),
                "history": [n.to_dict() for n in self._history],
            }

            with open(self._path, "w") as f:
                json.dump(data, f, indent=2)

            logger.debug(f"Saved {len(self._history)} notifications to {self._path}")

        except OSError as e:
            logger.error(f"Failed to save notifications: {e}")

    def _load(self) -> None:
        """Load preferences and history from the JSON file."""
        if not self._path or not self._path.exists():
            return

        try:
            with open(self._path) as f:
                data: dict[str, Any] = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in notifications file: {e}")
            return
        except OSError as e:
            logger.error(f"Failed to load notifications: {e}")
            return

        if not isinstance(data, dict):
            logger.error(f"Unexpected notifications file layout in {self._path}")
            return

        version = data.get("version", 1)
        if version != 1:
            logger.warning(f"Unknown notifications file version: {version}")

        preferences = data.get("preferences")
        if isinstance(preferences, dict):
            self._preferences = NotificationPreferences.from_dict(preferences)

        history = data.get("history")
        if not isinstance(history, list):
            history = []

        for item in history[: self._limit]:
            try:
                self._history.append(Notification.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid notification: {e}")

        logger.info(f"Loaded {len(self._history)} notifications from {self._path}")


__all__ = ["DEFAULT_HISTORY_LIMIT", "NotificationStore"]
