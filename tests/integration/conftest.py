"""Shared fixtures for breaker integration tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from tiered_breaker.database import BreakerDB


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    return tmp_path / "shared.db"


@pytest.fixture
async def two_connections(db_file: Path) -> AsyncGenerator[tuple[BreakerDB, BreakerDB], None]:
    """Two independent connections to one database file, like two service instances."""
    async with BreakerDB(db_file) as first, BreakerDB(db_file) as second:
        yield first, second
