"""Error handler middleware for FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tiered_breaker.exceptions import StorageUnavailable, UnknownOperation

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str


async def _storage_error_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    """Handle StorageUnavailable: the request fails hard, nothing is served stale."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    error_response = ErrorResponse(detail="Storage unavailable")
    return JSONResponse(status_code=500, content=error_response.model_dump())


async def _unknown_operation_handler(request: Request, exc: UnknownOperation) -> JSONResponse:
    """Handle UnknownOperation with a 400 naming the rejected action."""
    error_response = ErrorResponse(detail=str(exc))
    return JSONResponse(status_code=400, content=error_response.model_dump())


async def _value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle ValueError exceptions with a 400."""
    error_message = str(exc) if exc.args else ""
    error_response = ErrorResponse(detail=error_message)
    return JSONResponse(status_code=400, content=error_response.model_dump())


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions.

    Sanitized response: never leak internal error details.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error_response = ErrorResponse(detail="Internal server error")
    return JSONResponse(status_code=500, content=error_response.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers for the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(StorageUnavailable, _storage_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UnknownOperation, _unknown_operation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, _value_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
