"""Configuration profile management.

Provides utilities for detecting the configuration profile and the
platform, which selects the notification and audio backends.
"""

import os
import platform
from enum import Enum
from pathlib import Path


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Platform(Enum):
    """Supported platforms."""

    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


def detect_platform() -> Platform:
    """Detect the current platform.

    Returns:
        Platform enum value
    """
    system = platform.system().lower()

    if system == "darwin":
        return Platform.MACOS
    elif system == "linux":
        return Platform.LINUX
    else:
        return Platform.UNKNOWN


def detect_profile() -> Profile:
    """Detect appropriate configuration profile.

    Uses the ZENFLOW_PROFILE environment variable, falling back to dev.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get("ZENFLOW_PROFILE", "").lower()
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
        config_dir = Path(__file__).parent.parent.parent.parent / "config"

    return config_dir / f"{profile.value}.yaml"


def is_macos() -> bool:
    """Check if running on macOS."""
    return detect_platform() == Platform.MACOS


def is_linux() -> bool:
    """Check if running on Linux."""
    return detect_platform() == Platform.LINUX


__all__ = [
    "Platform",
    "Profile",
    "detect_platform",
    "detect_profile",
    "get_profile_path",
    "is_linux",
    "is_macos",
]
