"""Middleware for the tiered breaker API."""

from tiered_breaker.api.middleware.cors import configure_cors
from tiered_breaker.api.middleware.error_handler import register_error_handlers

__all__ = ["configure_cors", "register_error_handlers"]
