"""Breaker state and administration endpoints.

Endpoints:
- GET /breaker - Current breaker record (default record if none stored)
- POST /breaker/reset - Force the breaker back to full capacity
- GET /breaker/events - Tier change and reset audit trail
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from tiered_breaker.api.dependencies import get_db_dep, get_mutator_dep, get_reader_dep
from tiered_breaker.api.models import (
    BreakerEventsResponse,
    BreakerStateResponse,
    BreakerTransitionResponse,
)
from tiered_breaker.breaker import StateMutator, StateReader
from tiered_breaker.database import BreakerDB

router = APIRouter()


@router.get("", response_model=BreakerStateResponse)
async def get_breaker_state(
    reader: StateReader = Depends(get_reader_dep),
) -> dict[str, Any]:
    """Return the current breaker record without creating one."""
    record = await reader.read()
    return record.to_dict()


@router.post("/reset", response_model=BreakerTransitionResponse)
async def reset_breaker(
    mutator: StateMutator = Depends(get_mutator_dep),
) -> dict[str, Any]:
    """Reset the breaker to full capacity with cleared counters.

    Intended for operators after a manual fix; always reports a change.
    """
    result = await mutator.reset()
    return result.to_dict()


@router.get("/events", response_model=BreakerEventsResponse)
async def get_breaker_events(
    limit: int = Query(default=20, ge=1, le=500),
    db: BreakerDB = Depends(get_db_dep),
) -> dict[str, Any]:
    """List recent tier changes and resets, newest first.

    Args:
        limit: Maximum number of events to return.
        db: Database dependency (injected).
    """
    events = await db.fetch_breaker_events(limit=limit)
    return {"events": events, "total": len(events)}
