"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Environment override of the API base URL
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from lifetrack.categories import Category

from . import (
    ApiConfig,
    CacheConfig,
    GoalsConfig,
    LifetrackConfig,
    LoggingConfig,
    NotificationsConfig,
    SchedulerConfig,
)
from .profiles import Profile, default_config_dir, detect_profile, get_profile_path

logger = logging.getLogger(__name__)

API_URL_ENV_VAR = "LIFETRACK_API_URL"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_path = path.parent / base_name
        base_config = load_yaml_with_inheritance(base_path)
        config = deep_merge(base_config, config)

    return config


def parse_goal_targets(data: dict[Any, Any]) -> dict[Category, int]:
    """Convert a raw ``{category: minutes}`` mapping to typed goal targets.

    Raises:
        UnknownCategoryError: If a key is not a known category
        ValueError: If a target is not a non-negative integer
    """
    targets: dict[Category, int] = {}
    for key, minutes in data.items():
        category = Category.parse(key)
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 0:
            raise ValueError(f"Goal target for {category.value} must be non-negative minutes")
        targets[category] = minutes
    return targets


def dict_to_config(data: dict[str, Any]) -> LifetrackConfig:
    """Convert raw dict to typed LifetrackConfig dataclass."""
    root = data.get("lifetrack", {}) or {}

    # YAML yields None for empty sections
    def safe_get(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    return LifetrackConfig(
        api=ApiConfig(**safe_get("api")),
        cache=CacheConfig(**safe_get("cache")),
        scheduler=SchedulerConfig(**safe_get("scheduler")),
        goals=_parse_goals_config(safe_get("goals")),
        notifications=NotificationsConfig(**safe_get("notifications")),
        logging=LoggingConfig(**safe_get("logging")),
    )


def _parse_goals_config(data: dict[str, Any]) -> GoalsConfig:
    """Parse goals config, validating category keys."""
    targets = data.get("targets")
    if targets is None:
        return GoalsConfig()
    return GoalsConfig(targets=parse_goal_targets(targets))


def apply_env_overrides(config: LifetrackConfig) -> LifetrackConfig:
    """Apply environment variable overrides in place."""
    api_url = os.environ.get(API_URL_ENV_VAR)
    if api_url:
        logger.debug(f"API base URL overridden by {API_URL_ENV_VAR}")
        config.api.base_url = api_url
    return config


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        self._config_dir = config_dir or default_config_dir()

    def load(self, path: Path) -> LifetrackConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed LifetrackConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_profile(self, profile: str) -> LifetrackConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed LifetrackConfig for the profile

        Raises:
            ValueError: If the profile name is unknown
        """
        return self.load(get_profile_path(Profile(profile), self._config_dir))

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(
    path: str | Path | None = None,
    profile: str | Profile | None = None,
    config_dir: Path | None = None,
) -> LifetrackConfig:
    """Load Lifetrack configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given
        config_dir: Directory holding profile files

    Returns:
        Parsed LifetrackConfig with environment overrides applied

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader(config_dir)

    if path is not None:
        config = loader.load(Path(path))
    else:
        if profile is None:
            profile = detect_profile()
        name = profile.value if isinstance(profile, Profile) else profile
        config = loader.load_profile(name)

    return apply_env_overrides(config)


__all__ = [
    "API_URL_ENV_VAR",
    "YAMLConfigLoader",
    "apply_env_overrides",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
    "parse_goal_targets",
]
