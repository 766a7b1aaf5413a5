"""Desktop notifications via native command-line tools.

Uses `notify-send` on Linux and `osascript` on macOS. Each notification is
sent from a short-lived daemon thread so a hung notification service
cannot delay the caller.
"""

import logging
import shutil
import subprocess
import threading

from ..config.profiles import Platform

logger = logging.getLogger(__name__)


def _applescript_quote(text: str) -> str:
    """Quote a string for use inside an AppleScript string literal."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier:
    """Notification sink using the platform's notification command."""

    def __init__(
        self,
        platform: Platform,
        app_name: str = "ZenFlow",
        timeout_seconds: float = 5.0,
    ) -> None:
        """Initialize desktop notifier.

        Args:
            platform: Platform to send notifications on (LINUX or MACOS)
            app_name: Application name shown by the notification service
            timeout_seconds: Upper bound on each notification command
        """
        self._platform = platform
        self._app_name = app_name
        self._timeout = timeout_seconds

        if platform == Platform.MACOS:
            self._command_path = shutil.which("osascript")
        elif platform == Platform.LINUX:
            self._command_path = shutil.which("notify-send")
        else:
            self._command_path = None

    @property
    def is_available(self) -> bool:
        """Check if the notification command is available."""
        return self._command_path is not None

    def build_command(self, title: str, body: str) -> list[str]:
        """Build the command line that shows one notification."""
        if self._command_path is None:
            raise RuntimeError("Notification command not available")

        if self._platform == Platform.MACOS:
            script = (
                f"display notification {_applescript_quote(body)} "
                f"with title {_applescript_quote(title)} "
                f"subtitle {_applescript_quote(self._app_name)}"
            )
            return [self._command_path, "-e", script]

        return [self._command_path, "--app-name", self._app_name, "--", title, body]

    def notify(self, title: str, body: str) -> None:
        """Send a notification in the background."""
        if not self.is_available:
            return

        thread = threading.Thread(
            target=self._send,
            args=(title, body),
            daemon=True,
            name="zenflow-notify",
        )
        thread.start()

    def _send(self, title: str, body: str) -> None:
        """Run the notification command, logging any failure."""
        try:
            result = subprocess.run(
                self.build_command(title, body),
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
            if result.returncode != 0:
                logger.warning(f"Notification command failed: {result.stderr.strip()}")
        except (subprocess.SubprocessError, OSError, RuntimeError) as e:
            logger.warning(f"Failed to send notification: {e}")


__all__ = ["DesktopNotifier"]
