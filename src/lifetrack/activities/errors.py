"""Error types for session tracking.

State errors signal a command issued in the wrong lifecycle state.
"""


class StateError(Exception):
    """Base exception for session lifecycle precondition violations."""

    pass


class AlreadyTrackingError(StateError):
    """Raised when starting a session while one is active."""

    pass


class NotTrackingError(StateError):
    """Raised when ticking or stopping while no session is active."""

    pass


__all__ = [
    "AlreadyTrackingError",
    "NotTrackingError",
    "StateError",
]
