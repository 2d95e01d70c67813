"""Pydantic models for the tiered breaker API."""

from tiered_breaker.api.models.requests import ServiceRequestBody
from tiered_breaker.api.models.responses import (
    BreakerEventResponse,
    BreakerEventsResponse,
    BreakerStateResponse,
    BreakerTransitionResponse,
    ServiceResponseModel,
)

__all__ = [
    "BreakerEventResponse",
    "BreakerEventsResponse",
    "BreakerStateResponse",
    "BreakerTransitionResponse",
    "ServiceRequestBody",
    "ServiceResponseModel",
]
