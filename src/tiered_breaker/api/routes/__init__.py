"""Route registration for FastAPI app.

Wires all route modules (health, requests, breaker) to the FastAPI app
with correct URL prefixes.
"""

from __future__ import annotations

from fastapi import FastAPI

from tiered_breaker.api.routes import breaker, health, requests


def register_routes(app: FastAPI) -> None:
    """Register all route modules to the FastAPI app.

    This function is idempotent - calling it multiple times on the same app
    will not duplicate routes.

    Args:
        app: The FastAPI application instance.
    """
    if getattr(app.state, "routes_registered", False):
        return

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(requests.router, prefix="/requests", tags=["requests"])
    app.include_router(breaker.router, prefix="/breaker", tags=["breaker"])

    app.state.routes_registered = True
