"""Activities module for Lifetrack.

Provides the tracking session lifecycle.
"""

from .errors import AlreadyTrackingError, NotTrackingError, StateError
from .models import ActivitySession, Productivity, SessionState
from .tracker import ActivityTracker

__all__ = [
    "ActivitySession",
    "ActivityTracker",
    "AlreadyTrackingError",
    "NotTrackingError",
    "Productivity",
    "SessionState",
    "StateError",
]
