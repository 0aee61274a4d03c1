"""Error types for the remote monitoring service.

Custom exceptions for HTTP calls, aggregated source fetches, and
malformed query input.
"""


class ApiError(Exception):
    """Base exception for remote service errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class ApiTimeoutError(ApiError):
    """Raised when a request to the remote service times out."""

    pass


class ApiConnectionError(ApiError):
    """Raised when the remote service cannot be reached."""

    pass


class SourceFetchError(ApiError):
    """Raised when one aggregated data source fails to fetch."""

    def __init__(self, source: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"{source}: {reason}", status_code)
        self.source = source
        self.reason = reason


class ValidationError(ValueError):
    """Raised for malformed query input such as an unparseable date."""

    pass


__all__ = [
    "ApiConnectionError",
    "ApiError",
    "ApiTimeoutError",
    "SourceFetchError",
    "ValidationError",
]
