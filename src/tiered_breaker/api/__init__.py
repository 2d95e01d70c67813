"""Tiered breaker REST API package.

FastAPI front door: parses service requests, runs them through the breaker
workflow and maps outcomes to HTTP status codes.
"""

from tiered_breaker.api.app import create_app

__all__ = ["create_app"]
