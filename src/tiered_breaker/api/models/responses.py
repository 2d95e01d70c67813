"""API response models for the tiered breaker."""

from typing import Literal

from pydantic import BaseModel, Field


class BreakerTransitionResponse(BaseModel):
    """A state mutator transition as reported to clients."""

    action: Literal["FAILURE", "SUCCESS", "RESET"]
    tier: int = Field(ge=1, le=3)
    previous_tier: int = Field(ge=1, le=3)
    error_count: int = Field(ge=0)
    recovery_points: int = Field(ge=0)
    changed: bool
    last_updated: str
    message: str | None = None


class ServiceResponseModel(BaseModel):
    """Outcome of a service request. The HTTP status mirrors ``status``."""

    status: int
    tier: int = Field(ge=1, le=3)
    message: str
    breaker: BreakerTransitionResponse | None = None


class BreakerStateResponse(BaseModel):
    """Current breaker record."""

    tier: int = Field(ge=1, le=3)
    tier_label: str
    error_count: int = Field(ge=0)
    recovery_points: int = Field(ge=0)
    last_updated: str | None = None


class BreakerEventResponse(BaseModel):
    """One row of the tier change audit trail."""

    id: int
    action: Literal["FAILURE", "SUCCESS", "RESET"]
    from_tier: int
    to_tier: int
    direction: Literal["degraded", "promoted", "unchanged"]
    error_count: int
    recovery_points: int
    created_at: str


class BreakerEventsResponse(BaseModel):
    """Audit trail page, newest first."""

    events: list[BreakerEventResponse]
    total: int
