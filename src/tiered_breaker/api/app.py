"""FastAPI application factory with lifespan dependency management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from tiered_breaker import __version__
from tiered_breaker.api import dependencies
from tiered_breaker.api.middleware import configure_cors, register_error_handlers
from tiered_breaker.api.routes import register_routes
from tiered_breaker.settings import resolve_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the breaker database on startup and close it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during the application's running state.
    """
    settings = resolve_settings()
    await dependencies.init_dependencies(settings)
    try:
        yield
    finally:
        await dependencies.shutdown_dependencies()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        A configured FastAPI application with lifespan management.
    """
    app = FastAPI(
        title="Tiered Breaker",
        version=__version__,
        docs_url="/docs",
        lifespan=lifespan,
    )

    configure_cors(app)
    register_error_handlers(app)
    register_routes(app)

    return app
