"""Domain models for the tiered circuit breaker.

BreakerRecord mirrors the single persisted row. Absent/Present is the
explicit result of a point read, resolved once by the state reader.
TransitionResult, HandlerResult and ServiceResponse carry the outcome of
each step of a request through the workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .breaker_config import Tier, Transition
from .exceptions import TierFailure

# Fixed key of the singleton breaker record
BREAKER_KEY = "SYSTEM_STATE"


@dataclass(frozen=True)
class BreakerRecord:
    """Snapshot of the shared breaker state.

    Attributes:
        tier: Current operational tier.
        error_count: Accumulated failure signal driving degradation.
        recovery_points: Consecutive genuine successes driving promotion.
        last_updated: ISO-8601 timestamp of the last mutation, None if never stored.
        version: Write counter, bumped by every state mutation.
    """

    tier: Tier = Tier.FULL_CAPACITY
    error_count: int = 0
    recovery_points: int = 0
    last_updated: str | None = None
    version: int = 0

    @classmethod
    def default(cls) -> BreakerRecord:
        """Return the record used when nothing is stored yet."""
        return cls()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> BreakerRecord:
        """Build a record from a breaker_state row.

        Raises:
            ValueError: If the row holds an unknown tier or negative counters.
        """
        try:
            tier = Tier(int(row["tier"]))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid tier in breaker record: {row['tier']!r}") from e

        error_count = int(row["error_count"] or 0)
        recovery_points = int(row["recovery_points"] or 0)
        if error_count < 0 or recovery_points < 0:
            msg = (
                f"Negative counters in breaker record "
                f"(error_count={error_count}, recovery_points={recovery_points})"
            )
            raise ValueError(msg)

        return cls(
            tier=tier,
            error_count=error_count,
            recovery_points=recovery_points,
            last_updated=row["last_updated"],
            version=int(row["version"] or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tier": self.tier.value,
            "tier_label": self.tier.label,
            "error_count": self.error_count,
            "recovery_points": self.recovery_points,
            "last_updated": self.last_updated,
        }


@dataclass(frozen=True)
class Absent:
    """No breaker record is stored yet."""


@dataclass(frozen=True)
class Present:
    """A breaker record is stored."""

    record: BreakerRecord


RecordLookup = Absent | Present


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of one state mutator transition."""

    action: Transition
    tier: Tier
    error_count: int
    recovery_points: int
    changed: bool
    last_updated: str
    previous_tier: Tier
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "action": self.action.value,
            "tier": self.tier.value,
            "previous_tier": self.previous_tier.value,
            "error_count": self.error_count,
            "recovery_points": self.recovery_points,
            "changed": self.changed,
            "last_updated": self.last_updated,
        }
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass(frozen=True)
class ServiceRequest:
    """Incoming request as seen by the breaker.

    Attributes:
        error: True when the caller asks the service to simulate a failure.
    """

    error: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> ServiceRequest:
        """Build a request from a decoded body; only a literal True sets the flag."""
        if not payload:
            return cls()
        return cls(error=payload.get("error") is True)


@dataclass(frozen=True)
class HandlerResult:
    """Result of invoking a tier handler: a success body or a TierFailure."""

    status: int
    tier: Tier
    message: str
    failure: TierFailure | None = None

    @property
    def ok(self) -> bool:
        """Return True when the handler produced a success result."""
        return self.failure is None


@dataclass(frozen=True)
class ServiceResponse:
    """Final outcome of a request, ready for the transport layer."""

    status: int
    tier: Tier
    message: str
    transition: TransitionResult | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status,
            "tier": self.tier.value,
            "message": self.message,
            "breaker": self.transition.to_dict() if self.transition else None,
        }
