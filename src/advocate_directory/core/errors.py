"""Exception types shared by the query layer and the HTTP surface."""

from __future__ import annotations

from typing import Any

HTTP_BAD_REQUEST = 400
HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVICE_UNAVAILABLE = 503


class AdvocateDirectoryError(Exception):
    """Base exception for failures surfaced to API callers.

    Subclasses fix the HTTP status and the machine-readable error code so the
    application can translate any of them into a JSON body uniformly.
    """

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable error body."""
        body: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AdvocateDirectoryError):
    """Raised when request parameters are malformed or contradictory.

    Validation always happens before the backing store is touched.
    """

    status_code = HTTP_BAD_REQUEST
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str, received: Any = None) -> None:
        super().__init__(
            message,
            details=[{"field": field, "message": message, "received": received}],
        )
        self.field = field


class DataSourceError(AdvocateDirectoryError):
    """Raised when the backing store fails to count or fetch records."""

    status_code = HTTP_SERVICE_UNAVAILABLE
    code = "DATA_SOURCE_ERROR"


class RateLimitError(AdvocateDirectoryError):
    """Raised when a client exceeds its request allowance."""

    status_code = HTTP_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"

    def __init__(self, retry_after: int) -> None:
        super().__init__("Rate limit exceeded", details={"retryAfter": retry_after})
        self.retry_after = retry_after
