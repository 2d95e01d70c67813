"""Tier handlers.

Pure functions: given a request they return a HandlerResult. The
full-capacity handler reports its designated failure as a value so the
workflow can record it against the breaker instead of letting it escape.
"""

from __future__ import annotations

import logging

from .breaker_config import Tier
from .exceptions import TierFailure
from .models import HandlerResult, ServiceRequest

logger = logging.getLogger(__name__)

FULL_CAPACITY_MESSAGE = "Full Capacity"
DEGRADED_MESSAGE = "Degraded Mode"


def serve_full_capacity(request: ServiceRequest) -> HandlerResult:
    """Strict handler: fails whenever the request asks for a failure."""
    if request.error:
        failure = TierFailure("CRITICAL_FAILURE")
        logger.debug("Full capacity handler failed: %s", failure.code)
        return HandlerResult(
            status=500,
            tier=Tier.FULL_CAPACITY,
            message="Internal Server Error",
            failure=failure,
        )
    return HandlerResult(status=200, tier=Tier.FULL_CAPACITY, message=FULL_CAPACITY_MESSAGE)


def serve_degraded(request: ServiceRequest) -> HandlerResult:
    """Lenient handler: ignores the error flag and always succeeds."""
    return HandlerResult(status=200, tier=Tier.DEGRADED, message=DEGRADED_MESSAGE)
