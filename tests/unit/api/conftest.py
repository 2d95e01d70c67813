"""Shared fixtures for API unit tests.

Routes run against an in-memory database injected through dependency
overrides, so no lifespan is needed.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tiered_breaker.api.dependencies import get_db_dep, get_optional_db_dep
from tiered_breaker.api.middleware import register_error_handlers
from tiered_breaker.api.routes import register_routes
from tiered_breaker.database import BreakerDB


def create_test_app(db: BreakerDB | None) -> FastAPI:
    """Create a test FastAPI app with routes and error handlers, no lifespan."""
    app = FastAPI(title="Tiered Breaker Test", version="1.0.0")
    register_error_handlers(app)
    register_routes(app)
    if db is not None:
        app.dependency_overrides[get_db_dep] = lambda: db
    app.dependency_overrides[get_optional_db_dep] = lambda: db
    return app


@pytest.fixture
def app(db: BreakerDB) -> FastAPI:
    return create_test_app(db)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient bound to the test app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
