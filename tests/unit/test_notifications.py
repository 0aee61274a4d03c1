"""Unit tests for notifications."""

import json
from pathlib import Path

import pytest

from lifetrack.categories import Category
from lifetrack.events import EventBus, GoalCompleted, GoalsReset, StreakMilestoneReached
from lifetrack.notifications import (
    NonCriticalSideEffectError,
    Notification,
    NotificationCenter,
    NotificationPreferences,
    NotificationStore,
    NotificationType,
    format_event,
)


def _note(title: str = "t") -> Notification:
    return Notification(type=NotificationType.GOAL_COMPLETED, title=title, message="m")


class TestFormatEvent:
    """Tests for event formatting."""

    def test_goal_completed(self) -> None:
        note = format_event(GoalCompleted(Category.WORK, 240))
        assert note.type is NotificationType.GOAL_COMPLETED
        assert note.title == "Goal Completed!"
        assert "Work: 240 minute goal reached" in note.message

    def test_streak_milestone(self) -> None:
        note = format_event(StreakMilestoneReached(7, "Strong Week"))
        assert note.message == "7 consecutive days - Strong Week"

    def test_unknown_event(self) -> None:
        with pytest.raises(TypeError):
            format_event(object())  # type: ignore[arg-type]


class TestNotificationPreferences:
    """Tests for NotificationPreferences."""

    def test_master_switch(self) -> None:
        prefs = NotificationPreferences(enable_notifications=False)
        assert not prefs.allows(NotificationType.GOAL_COMPLETED)

    def test_per_type_switches(self) -> None:
        prefs = NotificationPreferences(streak_notifications=False)
        assert prefs.allows(NotificationType.GOAL_COMPLETED)
        assert not prefs.allows(NotificationType.STREAK_MILESTONE)

    def test_from_dict_ignores_junk(self) -> None:
        prefs = NotificationPreferences.from_dict(
            {"enable_sounds": False, "volume": 3, "enable_celebrations": "yes"}
        )
        assert prefs == NotificationPreferences(enable_sounds=False)


class TestNotificationStore:
    """Tests for NotificationStore."""

    def test_history_is_bounded_newest_first(self) -> None:
        """Test the oldest notification is evicted beyond the limit."""
        store = NotificationStore(history_limit=2)
        for title in ("a", "b", "c"):
            store.add(_note(title))

        assert [n.title for n in store.history()] == ["c", "b"]

    def test_preferences_returned_as_copy(self) -> None:
        store = NotificationStore()
        store.preferences.enable_sounds = False
        assert store.preferences.enable_sounds is True

    def test_update_unknown_preference(self) -> None:
        with pytest.raises(TypeError):
            NotificationStore().update_preferences(volume=True)

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        """Test preferences and history survive a reload."""
        path = tmp_path / "nested" / "notifications.json"
        store = NotificationStore(path)
        store.update_preferences(enable_sounds=False)
        store.add(_note("saved"))

        data = json.loads(path.read_text())
        assert data["version"] == 1

        reloaded = NotificationStore(path)
        assert reloaded.preferences.enable_sounds is False
        assert [n.title for n in reloaded.history()] == ["saved"]

    def test_corrupt_file_starts_fresh(self, tmp_path: Path) -> None:
        path = tmp_path / "notifications.json"
        path.write_text("{not json")

        store = NotificationStore(path)

        assert store.history() == []
        assert store.preferences == NotificationPreferences()

    def test_invalid_entries_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "notifications.json"
        good = _note("kept").to_dict()
        path.write_text(json.dumps({"version": 1, "history": [good, {"id": "x"}]}))

        assert [n.title for n in NotificationStore(path).history()] == ["kept"]

    def test_rejects_zero_limit(self) -> None:
        with pytest.raises(ValueError):
            NotificationStore(history_limit=0)


class TestNotificationCenter:
    """Tests for NotificationCenter."""

    def test_dispatch_runs_side_effects(self) -> None:
        """Test sound, push, and celebration run for a goal completion."""
        ran: list[str] = []
        center = NotificationCenter(
            sound_player=lambda n: ran.append("sound"),
            push_sender=lambda n: ran.append("push"),
            celebrate=lambda n: ran.append("celebrate"),
        )

        note = center.dispatch(GoalCompleted(Category.STUDY, 120))

        assert note is not None
        assert ran == ["sound", "push", "celebrate"]
        assert center.history() == [note]

    def test_reset_is_not_celebrated(self) -> None:
        ran: list[str] = []
        center = NotificationCenter(celebrate=lambda n: ran.append("celebrate"))

        center.dispatch(GoalsReset())

        assert ran == []

    def test_failing_side_effects_are_contained(self) -> None:
        """Test side effect errors never escape dispatch."""

        def no_audio(note: Notification) -> None:
            raise NonCriticalSideEffectError("no audio device")

        def broken_push(note: Notification) -> None:
            raise RuntimeError("push service down")

        center = NotificationCenter(sound_player=no_audio, push_sender=broken_push)

        assert center.dispatch(GoalCompleted(Category.WORK, 1)) is not None
        assert len(center.history()) == 1

    def test_suppressed_by_preferences(self) -> None:
        store = NotificationStore()
        store.update_preferences(goal_notifications=False)
        center = NotificationCenter(store)

        assert center.dispatch(GoalCompleted(Category.WORK, 1)) is None
        assert center.history() == []

    def test_disabled_sound_is_skipped(self) -> None:
        ran: list[str] = []
        store = NotificationStore()
        store.update_preferences(enable_sounds=False)
        center = NotificationCenter(store, sound_player=lambda n: ran.append("sound"))

        center.dispatch(StreakMilestoneReached(3, "Consistent Beginner"))

        assert ran == []

    def test_attach_and_detach(self) -> None:
        """Test the center follows the bus until detached."""
        bus = EventBus()
        center = NotificationCenter()

        center.attach(bus)
        bus.publish(GoalCompleted(Category.EXERCISE, 90))
        center.detach()
        bus.publish(GoalCompleted(Category.EXERCISE, 90))

        assert len(center.history()) == 1
        assert bus.handler_count(GoalCompleted) == 0
