"""Root conftest.py for pytest configuration.

Provides --run-slow flag to opt in to slow tests (skipped by default) and
the fixtures shared by unit and integration tests.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest

from tiered_breaker.database import BreakerDB


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run tests marked @pytest.mark.slow"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="needs --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
async def db() -> AsyncGenerator[BreakerDB, None]:
    """In-memory database with schema initialized."""
    async with BreakerDB(":memory:") as database:
        yield database


@pytest.fixture
async def file_db(tmp_path) -> AsyncGenerator[BreakerDB, None]:
    """File-backed database in WAL mode."""
    async with BreakerDB(tmp_path / "breaker.db") as database:
        yield database


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> StepClock:
    """Clock for StateMutator that yields strictly increasing timestamps."""
    return StepClock()
