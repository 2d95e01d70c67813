"""Exception classes for the tiered circuit breaker."""

from __future__ import annotations


class BreakerError(Exception):
    """Base exception for breaker errors."""

    pass


class StorageUnavailable(BreakerError):
    """Raised when the shared breaker record cannot be read or written.

    Attributes:
        operation: Name of the storage operation that failed.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        msg = f"Storage unavailable during {operation}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class TierFailure(BreakerError):
    """Designated failure signalled by the full-capacity tier handler.

    Carried as a value inside a HandlerResult rather than raised past the
    request workflow.
    """

    def __init__(self, code: str = "CRITICAL_FAILURE") -> None:
        self.code = code
        super().__init__(code)


class UnknownOperation(BreakerError):
    """Raised when the state mutator is asked for a transition it does not know."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Unknown action: {action}")
