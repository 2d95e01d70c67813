"""Pure hysteresis rules for the tiered breaker.

These functions decide the next state from the current one without touching
storage, so the state mutator can run them inside the storage transaction that
reads and writes the record.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..breaker_config import DEFAULT_CONFIG, HysteresisConfig, Tier
from ..models import BreakerRecord


@dataclass(frozen=True)
class SuccessDecision:
    """Next counters and tier after a recorded success."""

    tier: Tier
    error_count: int
    recovery_points: int


def degrade_on_failure(
    tier: Tier,
    error_count: int,
    config: HysteresisConfig = DEFAULT_CONFIG,
) -> Tier:
    """Return the tier after a failure.

    Args:
        tier: Tier stored before the failure was counted.
        error_count: Error count including this failure.
        config: Threshold configuration.

    Returns:
        The same tier, or the next worse one. Never skips a tier.
    """
    target = tier.value
    if tier.value < Tier.MAINTENANCE.value and error_count >= config.degrade_to_maintenance:
        target = Tier.MAINTENANCE.value
    elif tier.value < Tier.DEGRADED.value and error_count >= config.degrade_to_degraded:
        target = Tier.DEGRADED.value
    return Tier(min(target, tier.value + 1))


def evaluate_success(
    record: BreakerRecord,
    had_error_flag: bool,
    config: HysteresisConfig = DEFAULT_CONFIG,
) -> SuccessDecision:
    """Return the state after a recorded success.

    At full capacity a success slowly forgets old errors. In a degraded tier
    a protected success (the request asked for a failure and the lenient
    tier absorbed it) counts as stress and breaks the recovery streak, while
    a genuine success adds a recovery point and promotes one tier once the
    streak reaches the recovery threshold.

    Args:
        record: Current breaker record.
        had_error_flag: True if the originating request carried the error flag.
        config: Threshold configuration.
    """
    if record.tier is Tier.FULL_CAPACITY:
        return SuccessDecision(
            tier=record.tier,
            error_count=max(0, record.error_count - 1),
            recovery_points=0,
        )

    if had_error_flag:
        error_count = record.error_count + 1
        tier = record.tier
        if error_count >= config.degrade_to_maintenance and tier.value < Tier.MAINTENANCE.value:
            tier = Tier.MAINTENANCE
        return SuccessDecision(tier=tier, error_count=error_count, recovery_points=0)

    recovery_points = record.recovery_points + 1
    if recovery_points >= config.recovery_threshold:
        return SuccessDecision(
            tier=Tier(record.tier.value - 1),
            error_count=0,
            recovery_points=0,
        )
    return SuccessDecision(
        tier=record.tier,
        error_count=record.error_count,
        recovery_points=recovery_points,
    )
