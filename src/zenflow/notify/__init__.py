"""Notification module for ZenFlow.

Delivers transient, user-visible reminder notifications. Delivery is
best-effort and fire-and-forget: sinks never raise and never block the
caller on the desktop notification service.

Usage:
    sink = create_notification_sink(config.notifications)
    sink.notify("⏰ ZenFlow Reminder", "Call the bank")

    # For testing
    from zenflow.notify.mock import MockNotifier
"""

import logging
from typing import TYPE_CHECKING, Protocol

from ..config.profiles import Platform, detect_platform

if TYPE_CHECKING:
    from ..config import NotificationConfig

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Interface for transient user notifications."""

    def notify(self, title: str, body: str) -> None:
        """Show a notification.

        Best-effort: may be a no-op if the user has not granted permission
        or the platform has no notification service. Must never raise.

        Args:
            title: Notification title
            body: Notification body text
        """
        ...


class NullNotifier:
    """Notification sink that drops everything."""

    def notify(self, title: str, body: str) -> None:
        """Discard the notification."""
        logger.debug(f"Notification dropped: {title}: {body}")


def create_notification_sink(
    config: "NotificationConfig | None" = None,
    use_mock: bool = False,
) -> NotificationSink:
    """Create platform-appropriate notification sink.

    Args:
        config: Notification configuration (uses defaults if None)
        use_mock: If True, return mock implementation for testing

    Returns:
        NotificationSink for the current platform, or a NullNotifier if
        notifications are disabled or no desktop service is available
    """
    enabled = True
    app_name = "ZenFlow"
    timeout_seconds = 5.0

    if config is not None:
        enabled = config.enabled
        app_name = config.app_name
        timeout_seconds = config.timeout_seconds

    if use_mock:
        from .mock import MockNotifier

        return MockNotifier()

    if not enabled:
        return NullNotifier()

    plat = detect_platform()
    if plat == Platform.UNKNOWN:
        logger.warning("No desktop notification service on this platform")
        return NullNotifier()

    from .desktop import DesktopNotifier

    notifier = DesktopNotifier(plat, app_name=app_name, timeout_seconds=timeout_seconds)
    if not notifier.is_available:
        logger.warning("Desktop notification command not found; notifications disabled")
        return NullNotifier()
    return notifier


__all__ = [
    "NotificationSink",
    "NullNotifier",
    "create_notification_sink",
]
