"""Request workflow: read state, route, invoke tier, mutate state, respond.

The workflow holds no state of its own. Every decision comes from the
breaker record read at the start of the request, and every outcome is
recorded back through the state mutator before the response is assembled.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .breaker import HandlerChoice, StateMutator, StateReader, route
from .breaker_config import HysteresisConfig, Tier
from .models import HandlerResult, ServiceRequest, ServiceResponse, TransitionResult
from .services import serve_degraded, serve_full_capacity

if TYPE_CHECKING:
    from .database import BreakerDB

logger = logging.getLogger(__name__)

MAINTENANCE_MESSAGE = "System under maintenance, try later"
MINIMUM_OPERATION_MESSAGE = "Operation at minimum"


def assemble_outcome(
    result: HandlerResult,
    transition: TransitionResult | None = None,
) -> ServiceResponse:
    """Translate a handler result into the response handed to the transport."""
    return ServiceResponse(
        status=result.status,
        tier=result.tier,
        message=result.message,
        transition=transition,
    )


def answer_maintenance(request: ServiceRequest) -> HandlerResult:
    """Fixed answers given at maintenance tier without invoking a handler."""
    if request.error:
        return HandlerResult(status=503, tier=Tier.MAINTENANCE, message=MAINTENANCE_MESSAGE)
    return HandlerResult(status=200, tier=Tier.MAINTENANCE, message=MINIMUM_OPERATION_MESSAGE)


class RequestWorkflow:
    """Sequences one request through the breaker.

    Usage:
        workflow = RequestWorkflow(db)
        response = await workflow.handle(ServiceRequest(error=False))
        print(response.status, response.message)
    """

    def __init__(self, db: BreakerDB, config: HysteresisConfig | None = None) -> None:
        self._reader = StateReader(db)
        self._mutator = StateMutator(db, config)

    @property
    def mutator(self) -> StateMutator:
        """Return the state mutator used for this workflow."""
        return self._mutator

    async def handle(self, request: ServiceRequest) -> ServiceResponse:
        """Serve a request at the current tier and record its outcome.

        Raises:
            StorageUnavailable: If the breaker record cannot be read or written.
        """
        record = await self._reader.read()
        choice = route(record.tier)

        if choice is HandlerChoice.TRY_FULL_CAPACITY:
            result = serve_full_capacity(request)
            if not result.ok:
                transition = await self._mutator.apply_failure()
                logger.info(
                    "Full capacity request failed (%s); error_count=%d",
                    result.failure.code if result.failure else "unknown",
                    transition.error_count,
                )
                return assemble_outcome(result, transition)
            transition = await self._mutator.apply_success(had_error_flag=False)
            return assemble_outcome(result, transition)

        if choice is HandlerChoice.DEGRADED:
            result = serve_degraded(request)
            transition = await self._mutator.apply_success(had_error_flag=request.error)
            return assemble_outcome(result, transition)

        result = answer_maintenance(request)
        transition = await self._mutator.apply_success(had_error_flag=request.error)
        return assemble_outcome(result, transition)
