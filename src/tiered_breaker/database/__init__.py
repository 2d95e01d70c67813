"""Async SQLite persistence for the shared breaker record.

All operations are async using aiosqlite for non-blocking I/O.
"""

from __future__ import annotations

from .connection import BUSY_TIMEOUT_SECONDS, DEFAULT_DB_PATH, SCHEMA_PATH, storage_errors
from .core import BreakerDB

__all__ = [
    "BUSY_TIMEOUT_SECONDS",
    "BreakerDB",
    "DEFAULT_DB_PATH",
    "SCHEMA_PATH",
    "storage_errors",
]
