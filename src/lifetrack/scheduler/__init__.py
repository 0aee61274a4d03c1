"""Scheduler module for Lifetrack.

Provides the single timer abstraction behind session ticks and
dashboard auto-refresh.
"""

import logging

from .base import CancellationToken, Scheduler, TickCallback
from .loop import AsyncioScheduler
from .mock import VirtualScheduler

logger = logging.getLogger(__name__)


def create_scheduler(use_mock: bool = False) -> Scheduler:
    """Create a scheduler.

    Args:
        use_mock: If True, return a VirtualScheduler for testing

    Returns:
        Scheduler implementation
    """
    if use_mock:
        logger.info("Scheduler: Using VirtualScheduler (requested)")
        return VirtualScheduler()
    return AsyncioScheduler()


__all__ = [
    "AsyncioScheduler",
    "CancellationToken",
    "Scheduler",
    "TickCallback",
    "VirtualScheduler",
    "create_scheduler",
]
