"""Async Python client for the tiered breaker REST API."""

from .client import BreakerClient
from .errors import BreakerUnavailable, ClientError, ServerError

__all__ = [
    "BreakerClient",
    "BreakerUnavailable",
    "ClientError",
    "ServerError",
]
