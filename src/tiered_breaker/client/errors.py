"""Exceptions raised by the breaker HTTP client."""

from __future__ import annotations

# Detail the API answers with when the breaker record cannot be reached
STORAGE_UNAVAILABLE_DETAIL = "Storage unavailable"


class ClientError(Exception):
    """A breaker API call answered with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response.
        message: The ``detail`` of the error body, or the raw body.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class ServerError(ClientError):
    """A 5xx response that carries no service outcome."""

    def __init__(self, status_code: int = 500, message: str = "Server error") -> None:
        super().__init__(status_code=status_code, message=message)


class BreakerUnavailable(ServerError):
    """The server could not read or write the shared breaker record.

    Raised for a 500 whose detail is the storage failure marker, and for
    a 503 from the readiness check.
    """
