"""Hysteresis configuration for the tiered circuit breaker.

Defines the service tiers, the transition names accepted by the state
mutator, and the degrade/recover threshold pair that drives the state
machine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Tier(Enum):
    """Operational capability tiers, ordered from best to worst."""

    FULL_CAPACITY = 1  # Strict handler, failures count against the breaker
    DEGRADED = 2  # Lenient handler, absorbs flagged failures
    MAINTENANCE = 3  # No handler, self-answering

    @property
    def label(self) -> str:
        """Return a human-readable tier label."""
        return _TIER_LABELS[self]


_TIER_LABELS = {
    Tier.FULL_CAPACITY: "Full Capacity",
    Tier.DEGRADED: "Degraded",
    Tier.MAINTENANCE: "Maintenance",
}


class Transition(Enum):
    """Transitions the state mutator knows how to apply."""

    FAILURE = "FAILURE"
    SUCCESS = "SUCCESS"
    RESET = "RESET"


@dataclass(frozen=True)
class HysteresisConfig:
    """Threshold pair for degradation and recovery.

    Degradation is fast and recovery is slow: the breaker leaves full
    capacity after a handful of errors, but climbs back only after an
    unbroken streak of genuine successes.

    Attributes:
        degrade_to_degraded: Error count that moves tier 1 to tier 2.
        degrade_to_maintenance: Error count that moves tier 1/2 to tier 3.
        recovery_threshold: Consecutive genuine successes to promote one tier.
    """

    degrade_to_degraded: int = 5
    degrade_to_maintenance: int = 10
    recovery_threshold: int = 10

    def __post_init__(self) -> None:
        for name in (
            "degrade_to_degraded",
            "degrade_to_maintenance",
            "recovery_threshold",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise ValueError(msg)
        if self.degrade_to_degraded >= self.degrade_to_maintenance:
            msg = (
                "degrade_to_degraded must be lower than degrade_to_maintenance "
                f"({self.degrade_to_degraded} >= {self.degrade_to_maintenance})"
            )
            raise ValueError(msg)


# Default configuration instance for convenience
DEFAULT_CONFIG = HysteresisConfig()
