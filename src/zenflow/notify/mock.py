"""Mock notification sink for testing."""

import threading


class MockNotifier:
    """Mock notifier that records notifications instead of showing them.

    Implements the NotificationSink protocol.
    """

    def __init__(self, fail: bool = False) -> None:
        """Initialize mock notifier.

        Args:
            fail: If True, simulate a denied permission by recording the
                  attempt but delivering nothing.
        """
        self._fail = fail
        self._lock = threading.Lock()
        self._sent: list[tuple[str, str]] = []
        self._attempts = 0

    def notify(self, title: str, body: str) -> None:
        """Record the notification."""
        with self._lock:
            self._attempts += 1
            if self._fail:
                return
            self._sent.append((title, body))

    def set_fail(self, fail: bool) -> None:
        """Enable or disable simulated delivery failure."""
        self._fail = fail

    @property
    def sent(self) -> list[tuple[str, str]]:
        """Get list of delivered (title, body) pairs."""
        with self._lock:
            return self._sent.copy()

    @property
    def bodies(self) -> list[str]:
        """Get the bodies of delivered notifications."""
        return [body for _, body in self.sent]

    @property
    def attempts(self) -> int:
        """Number of notify() calls, delivered or not."""
        return self._attempts

    def clear(self) -> None:
        """Clear recorded notifications."""
        with self._lock:
            self._sent.clear()
            self._attempts = 0


__all__ = ["MockNotifier"]
