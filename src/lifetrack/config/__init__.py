"""Configuration module for Lifetrack.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from lifetrack.categories import Category


def _default_targets() -> dict[Category, int]:
    return {
        Category.WORK: 240,
        Category.STUDY: 120,
        Category.EXERCISE: 90,
        Category.PERSONAL: 60,
        Category.CREATIVE: 60,
    }


@dataclass
class ApiConfig:
    """Remote monitoring service configuration."""

    base_url: str = "http://localhost:8000"
    timeout_seconds: float = 10.0
    recent_sessions_limit: int = 15
    mirror_monitor: bool = False


@dataclass
class CacheConfig:
    """Result cache configuration."""

    ttl_seconds: float = 30.0


@dataclass
class SchedulerConfig:
    """Periodic timer configuration."""

    session_tick_seconds: float = 1.0
    refresh_interval_seconds: float = 30.0
    auto_refresh: bool = True


@dataclass
class GoalsConfig:
    """Daily goal targets in minutes per category."""

    targets: dict[Category, int] = field(default_factory=_default_targets)


@dataclass
class NotificationsConfig:
    """Notification persistence configuration."""

    enabled: bool = True
    storage_path: str | None = "~/.lifetrack/notifications.json"
    history_limit: int = 50


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class LifetrackConfig:
    """Main Lifetrack configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    goals: GoalsConfig = field(default_factory=GoalsConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> LifetrackConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> LifetrackConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


# Public API
__all__ = [
    "ApiConfig",
    "CacheConfig",
    "ConfigLoader",
    "GoalsConfig",
    "LifetrackConfig",
    "LoggingConfig",
    "NotificationsConfig",
    "SchedulerConfig",
]
