"""Health check router for liveness and readiness endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Response

from tiered_breaker.api.dependencies import get_optional_db_dep
from tiered_breaker.breaker import StateReader
from tiered_breaker.database import BreakerDB
from tiered_breaker.exceptions import StorageUnavailable

router = APIRouter()


@router.get("/live")
def get_health_live() -> dict[str, str]:
    """Return liveness status."""
    return {"status": "alive"}


@router.get("/ready")
async def get_health_ready(
    response: Response,
    db: BreakerDB | None = Depends(get_optional_db_dep),
) -> dict[str, Any]:
    """Return readiness by reading the breaker record.

    Returns:
        status "ok" with the current tier if the store answers, otherwise
        status "unavailable" with a 503.
    """
    if db is None:
        response.status_code = 503
        return {"status": "unavailable", "detail": "Database not initialized"}

    try:
        record = await StateReader(db).read()
    except StorageUnavailable as e:
        response.status_code = 503
        return {"status": "unavailable", "detail": str(e)}

    return {"status": "ok", "tier": record.tier.value}
