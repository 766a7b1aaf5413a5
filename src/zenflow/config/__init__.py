"""Configuration module for ZenFlow.

This module provides the typed configuration sections and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class ReminderConfig:
    """Reminder engine configuration.

    Attributes:
        poll_interval_ms: Frequency of the due-task scan. Smaller values
            reduce firing latency at the cost of more frequent scans.
        snooze_minutes: Offset applied to a task's due time on snooze.
    """

    poll_interval_ms: int = 2000
    snooze_minutes: int = 5


@dataclass
class AlarmConfig:
    """Ringing alarm audio configuration."""

    audio_enabled: bool = True
    sound_path: str = "~/.zenflow/sounds/alarm.wav"
    output_device: str = "default"


@dataclass
class NotificationConfig:
    """Desktop notification configuration."""

    enabled: bool = True
    title: str = "⏰ ZenFlow Reminder"
    app_name: str = "ZenFlow"
    timeout_seconds: float = 5.0


@dataclass
class StorageConfig:
    """Persistence backend configuration."""

    backend: str = "json"
    data_dir: str = "~/.zenflow/data"
    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "zenflow"
    collection: str = "kv"


@dataclass
class InsightsConfig:
    """Productivity insights (Claude) configuration."""

    enabled: bool = True
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.3
    timeout_seconds: float = 60.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class TestingConfig:
    """Testing configuration."""

    mock_audio_enabled: bool = False
    mock_notifications_enabled: bool = False


@dataclass
class ZenFlowConfig:
    """Main ZenFlow configuration."""

    reminders: ReminderConfig = field(default_factory=ReminderConfig)
    alarm: AlarmConfig = field(default_factory=AlarmConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    insights: InsightsConfig = field(default_factory=InsightsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> ZenFlowConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> ZenFlowConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


__all__ = [
    "AlarmConfig",
    "ConfigLoader",
    "InsightsConfig",
    "LoggingConfig",
    "NotificationConfig",
    "ReminderConfig",
    "StorageConfig",
    "TestingConfig",
    "ZenFlowConfig",
]
