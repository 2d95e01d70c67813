"""Tier to handler routing."""

from __future__ import annotations

from enum import Enum

from ..breaker_config import Tier


class HandlerChoice(Enum):
    """Which handler serves a request at a given tier."""

    TRY_FULL_CAPACITY = "try_full_capacity"  # Strict handler, failure captured
    DEGRADED = "degraded"  # Lenient handler, always succeeds
    SELF_ANSWER = "self_answer"  # No handler invocation


_ROUTES = {
    Tier.FULL_CAPACITY: HandlerChoice.TRY_FULL_CAPACITY,
    Tier.DEGRADED: HandlerChoice.DEGRADED,
    Tier.MAINTENANCE: HandlerChoice.SELF_ANSWER,
}


def route(tier: Tier | int) -> HandlerChoice:
    """Map a tier to its handler choice.

    Raises:
        ValueError: If tier is not 1, 2 or 3.
    """
    try:
        resolved = Tier(tier)
    except ValueError:
        raise ValueError(f"Unknown tier: {tier!r}") from None
    return _ROUTES[resolved]
