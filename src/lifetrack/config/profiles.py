"""Configuration profile management.

Provides utilities for detecting the active configuration profile from
the environment.
"""

import os
from enum import Enum
from pathlib import Path

PROFILE_ENV_VAR = "LIFETRACK_PROFILE"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def default_config_dir() -> Path:
    """Default config/ directory at the project root."""
    return Path(__file__).parent.parent.parent.parent / "config"


def detect_profile() -> Profile:
    """Detect the configuration profile.

    Reads the LIFETRACK_PROFILE environment variable; anything missing
    or unrecognized falls back to the dev profile.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    profile_map = {
        "prod": Profile.PROD,
        "dev": Profile.DEV,
        "test": Profile.TEST,
    }
    return profile_map.get(env_profile, Profile.DEV)


def get_profile_path(profile: Profile | None = None, config_dir: Path | None = None) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile to use, or None to auto-detect
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    if profile is None:
        profile = detect_profile()

    if config_dir is None:
        config_dir = default_config_dir()

    return config_dir / f"{profile.value}.yaml"


__all__ = [
    "PROFILE_ENV_VAR",
    "Profile",
    "default_config_dir",
    "detect_profile",
    "get_profile_path",
]
