"""CORS middleware configuration for FastAPI."""

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

CORS_ENV_VAR = "TIERED_BREAKER_CORS_ORIGINS"


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware on the FastAPI app.

    Reads TIERED_BREAKER_CORS_ORIGINS to determine allowed origins.
    - If not set or '*': any origin may call the service
    - Otherwise: comma-separated list of origins

    Args:
        app: The FastAPI application instance to configure
    """
    cors_origins_env = os.environ.get(CORS_ENV_VAR, "*")

    if cors_origins_env.strip() == "*":
        allow_origins = ["*"]
    else:
        allow_origins = [
            origin.strip() for origin in cors_origins_env.split(",") if origin.strip()
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
