"""Composed BreakerDB class.

Combines the connection and breaker state mixins into the final BreakerDB
that provides the complete database API.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .connection import BUSY_TIMEOUT_SECONDS, ConnectionMixin
from .state import BreakerStateMixin


class BreakerDB(ConnectionMixin, BreakerStateMixin):
    """Async SQLite store for the shared breaker record.

    Usage:
        async with BreakerDB("breaker.db") as db:
            row = await db.fetch_breaker_row()
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        timeout: float = BUSY_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for testing.
            timeout: Busy timeout in seconds for locked database files.
        """
        super().__init__(db_path, timeout)

    async def __aenter__(self) -> BreakerDB:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit."""
        await self.close()
