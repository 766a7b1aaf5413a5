"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
"""

from pathlib import Path
from typing import Any

import yaml

from . import (
    AlarmConfig,
    InsightsConfig,
    LoggingConfig,
    NotificationConfig,
    ReminderConfig,
    StorageConfig,
    TestingConfig,
    ZenFlowConfig,
)

MIN_POLL_INTERVAL_MS = 100


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


def dict_to_config(data: dict[str, Any]) -> ZenFlowConfig:
    """Convert raw dict to typed ZenFlowConfig dataclass."""
    root = data.get("zenflow", {}) or {}

    # YAML gives None for empty sections
    def safe_get(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    return ZenFlowConfig(
        reminders=_parse_reminder_config(safe_get("reminders")),
        alarm=AlarmConfig(**safe_get("alarm")),
        notifications=NotificationConfig(**safe_get("notifications")),
        storage=StorageConfig(**safe_get("storage")),
        insights=InsightsConfig(**safe_get("insights")),
        logging=LoggingConfig(**safe_get("logging")),
        testing=TestingConfig(**safe_get("testing")),
    )


def _parse_reminder_config(data: dict[str, Any]) -> ReminderConfig:
    """Parse reminder config, clamping values that would stall the engine."""
    defaults = ReminderConfig()
    poll_interval_ms = int(data.get("poll_interval_ms", defaults.poll_interval_ms))
    snooze_minutes = int(data.get("snooze_minutes", defaults.snooze_minutes))
    return ReminderConfig(
        poll_interval_ms=max(MIN_POLL_INTERVAL_MS, poll_interval_ms),
        snooze_minutes=max(1, snooze_minutes),
    )


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> ZenFlowConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed ZenFlowConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_profile(self, profile: str) -> ZenFlowConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed ZenFlowConfig for the profile
        """
        config_path = self._config_dir / f"{profile}.yaml"
        return self.load(config_path)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> ZenFlowConfig:
    """Load ZenFlow configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given

    Returns:
        Parsed ZenFlowConfig

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    elif profile is not None:
        return loader.load_profile(profile)
    else:
        return loader.load_profile("dev")


__all__ = [
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
