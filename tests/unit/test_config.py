"""Unit tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from zenflow.config import ZenFlowConfig
from zenflow.config.loader import (
    MIN_POLL_INTERVAL_MS,
    YAMLConfigLoader,
    deep_merge,
    dict_to_config,
    load_config,
    load_yaml_with_inheritance,
)
from zenflow.config.profiles import Platform, Profile, detect_platform, detect_profile


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_override(self) -> None:
        """Test nested keys merge instead of replacing the section."""
        base = {"zenflow": {"reminders": {"poll_interval_ms": 2000, "snooze_minutes": 5}}}
        override = {"zenflow": {"reminders": {"poll_interval_ms": 1000}}}
        assert deep_merge(base, override) == {
            "zenflow": {"reminders": {"poll_interval_ms": 1000, "snooze_minutes": 5}}
        }

    def test_base_not_mutated(self) -> None:
        """Test the base dict is left untouched."""
        base = {"a": 1}
        deep_merge(base, {"a": 2})
        assert base == {"a": 1}


class TestLoadYaml:
    """Tests for YAML loading with inheritance."""

    def test_extends(self, tmp_path: Path) -> None:
        """Test a profile extends its base file."""
        (tmp_path / "base.yaml").write_text(
            "zenflow:\n  reminders:\n    poll_interval_ms: 2000\n    snooze_minutes: 5\n"
        )
        (tmp_path / "child.yaml").write_text(
            "extends: base.yaml\nzenflow:\n  reminders:\n    snooze_minutes: 10\n"
        )

        data = load_yaml_with_inheritance(tmp_path / "child.yaml")

        assert data["zenflow"]["reminders"] == {"poll_interval_ms": 2000, "snooze_minutes": 10}
        assert "extends" not in data

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_yaml_with_inheritance(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file gives all defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert YAMLConfigLoader(tmp_path).load(path) == ZenFlowConfig()


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_defaults(self) -> None:
        """Test missing sections use defaults."""
        config = dict_to_config({})
        assert config.reminders.poll_interval_ms == 2000
        assert config.reminders.snooze_minutes == 5
        assert config.notifications.title == "⏰ ZenFlow Reminder"
        assert config.storage.backend == "json"

    def test_null_sections(self) -> None:
        """Test empty YAML sections are treated as defaults."""
        config = dict_to_config({"zenflow": {"alarm": None, "storage": None}})
        assert config.alarm.audio_enabled is True

    def test_poll_interval_clamped(self) -> None:
        """Test a zero poll interval is raised to the minimum."""
        config = dict_to_config({"zenflow": {"reminders": {"poll_interval_ms": 0}}})
        assert config.reminders.poll_interval_ms == MIN_POLL_INTERVAL_MS

    def test_snooze_clamped(self) -> None:
        """Test a non-positive snooze becomes one minute."""
        config = dict_to_config({"zenflow": {"reminders": {"snooze_minutes": -3}}})
        assert config.reminders.snooze_minutes == 1

    def test_unknown_key_raises(self) -> None:
        """Test typos in a section are reported."""
        with pytest.raises(TypeError):
            dict_to_config({"zenflow": {"alarm": {"volume": 11}}})


class TestProfiles:
    """Tests for the shipped profile files."""

    @pytest.mark.parametrize("profile", ["dev", "prod", "test"])
    def test_profiles_load(self, profile: str) -> None:
        """Test every shipped profile parses."""
        assert isinstance(load_config(profile=profile), ZenFlowConfig)

    def test_dev_profile(self) -> None:
        """Test dev overrides the poll interval and log level."""
        config = load_config(profile="dev")
        assert config.reminders.poll_interval_ms == 1000
        assert config.logging.level == "DEBUG"
        assert config.reminders.snooze_minutes == 5

    def test_test_profile_uses_mocks(self) -> None:
        """Test the test profile needs no hardware or disk."""
        config = load_config(profile="test")
        assert config.storage.backend == "memory"
        assert config.testing.mock_audio_enabled is True
        assert config.testing.mock_notifications_enabled is True
        assert config.insights.enabled is False

    def test_default_profile_is_dev(self) -> None:
        """Test load_config() without arguments loads dev."""
        assert load_config() == load_config(profile="dev")


class TestDetection:
    """Tests for profile and platform detection."""

    def test_detect_profile_from_env(self) -> None:
        """Test ZENFLOW_PROFILE selects the profile."""
        with patch.dict(os.environ, {"ZENFLOW_PROFILE": "prod"}):
            assert detect_profile() == Profile.PROD

    def test_detect_profile_default(self) -> None:
        """Test an unknown value falls back to dev."""
        with patch.dict(os.environ, {"ZENFLOW_PROFILE": "staging"}):
            assert detect_profile() == Profile.DEV

    @pytest.mark.parametrize(
        ("system", "expected"),
        [("Darwin", Platform.MACOS), ("Linux", Platform.LINUX), ("Windows", Platform.UNKNOWN)],
    )
    def test_detect_platform(self, system: str, expected: Platform) -> None:
        """Test platform names map to Platform values."""
        with patch("zenflow.config.profiles.platform.system", return_value=system):
            assert detect_platform() == expected
