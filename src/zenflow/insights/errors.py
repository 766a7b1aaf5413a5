"""Error types for the insights module.

Custom exceptions for productivity insight generation.
"""


class InsightsError(Exception):
    """Base exception for insights-related errors."""

    pass


class InsightsTimeoutError(InsightsError):
    """Raised when the insights request times out."""

    pass


class InsightsAPIError(InsightsError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class InsightsAuthError(InsightsError):
    """Raised when authentication fails."""

    pass


class InsightsConnectivityError(InsightsError):
    """Raised when the API cannot be reached."""

    pass


class InsightsSchemaError(InsightsError):
    """Raised when the response does not match the insight report schema."""

    pass


__all__ = [
    "InsightsAPIError",
    "InsightsAuthError",
    "InsightsConnectivityError",
    "InsightsError",
    "InsightsSchemaError",
    "InsightsTimeoutError",
]
