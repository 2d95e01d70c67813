"""Database connection management and schema initialization.

Provides the base ConnectionMixin with connection lifecycle and schema setup,
plus the storage error translation shared by every operation.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import aiosqlite

from ..exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

# Schema ships inside the package next to this module
SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

# Default database path
DEFAULT_DB_PATH = Path.cwd() / "breaker.db"

# Seconds a writer waits on a locked database file before failing
BUSY_TIMEOUT_SECONDS = 5.0


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLite errors raised inside the block into StorageUnavailable."""
    try:
        yield
    except aiosqlite.Error as e:
        logger.error("Storage error during %s: %s", operation, e)
        raise StorageUnavailable(operation, str(e)) from e


class ConnectionMixin:
    """Base mixin providing database connection management.

    Manages the aiosqlite connection lifecycle and schema initialization.
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        timeout: float = BUSY_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for testing.
                     Defaults to breaker.db in the current working directory.
            timeout: Busy timeout in seconds for locked database files.
        """
        if db_path is None:
            self.db_path = DEFAULT_DB_PATH
        elif str(db_path) == ":memory:":
            self.db_path = ":memory:"  # type: ignore[assignment]
        else:
            self.db_path = Path(db_path)
        self._timeout = timeout
        self._conn: aiosqlite.Connection | None = None
        self._initialized = False
        self._write_lock = asyncio.Lock()

    @property
    def is_memory(self) -> bool:
        """Return True for an in-memory database."""
        return self.db_path == ":memory:"

    async def connect(self) -> None:
        """Open database connection and initialize schema.

        Raises:
            StorageUnavailable: If the database cannot be opened or initialized.
        """
        db_path = str(self.db_path) if isinstance(self.db_path, Path) else self.db_path
        if not self.is_memory:
            resolved_path = Path(db_path).resolve()
            logger.info("Database: %s (exists: %s)", resolved_path, resolved_path.exists())

        with storage_errors("connect"):
            self._conn = await aiosqlite.connect(db_path, timeout=self._timeout)
            self._conn.row_factory = aiosqlite.Row
            if not self.is_memory:
                # WAL lets readers proceed while another process writes
                await self._conn.execute("PRAGMA journal_mode=WAL")
            await self._initialize_schema()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None
            self._initialized = False

    async def _ensure_connected(self) -> aiosqlite.Connection:
        """Ensure database is connected and return the live connection."""
        if self._conn is None:
            await self.connect()
        if self._conn is None:
            raise StorageUnavailable("connect", "database not connected")
        return self._conn

    async def _initialize_schema(self) -> None:
        """Initialize database schema from the packaged SQL file."""
        if not self._conn:
            raise StorageUnavailable("schema", "database not connected")

        if self._initialized:
            return

        schema_sql = SCHEMA_PATH.read_text()
        async with self._write_lock:
            await self._conn.executescript(schema_sql)
            await self._conn.commit()
            self._initialized = True
            logger.debug("Database schema initialized")
