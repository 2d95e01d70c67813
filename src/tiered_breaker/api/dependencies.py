"""Dependency initialization and management for API singletons.

This module manages the module-level BreakerDB and settings singletons
during application lifespan (startup/shutdown).
"""

from __future__ import annotations

import logging

from fastapi import Depends

from tiered_breaker.breaker import StateMutator, StateReader
from tiered_breaker.database import BreakerDB
from tiered_breaker.settings import BreakerSettings
from tiered_breaker.workflow import RequestWorkflow

logger = logging.getLogger(__name__)

# Module-level singletons
_db: BreakerDB | None = None
_settings: BreakerSettings | None = None


def get_db_dep() -> BreakerDB:
    """Get the BreakerDB singleton.

    Raises:
        RuntimeError: If dependencies are not initialized.
    """
    if _db is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _db


def get_optional_db_dep() -> BreakerDB | None:
    """Get the BreakerDB singleton, or None before startup."""
    return _db


def get_settings_dep() -> BreakerSettings:
    """Get the settings the application was started with."""
    return _settings or BreakerSettings()


def get_reader_dep(db: BreakerDB = Depends(get_db_dep)) -> StateReader:
    """Build a state reader over the shared database."""
    return StateReader(db)


def get_mutator_dep(
    db: BreakerDB = Depends(get_db_dep),
    settings: BreakerSettings = Depends(get_settings_dep),
) -> StateMutator:
    """Build a state mutator over the shared database."""
    return StateMutator(db, settings.hysteresis)


def get_workflow_dep(
    db: BreakerDB = Depends(get_db_dep),
    settings: BreakerSettings = Depends(get_settings_dep),
) -> RequestWorkflow:
    """Build a request workflow over the shared database."""
    return RequestWorkflow(db, settings.hysteresis)


async def init_dependencies(settings: BreakerSettings) -> None:
    """Open the database singleton.

    Idempotent: calling it again reuses the existing connection.

    Args:
        settings: Resolved runtime settings.

    Raises:
        StorageUnavailable: If the database cannot be opened.
    """
    global _db, _settings

    if _db is not None:
        return

    db = BreakerDB(db_path=settings.db_path)
    await db.connect()
    _db = db
    _settings = settings
    logger.info("Breaker API using database %s", settings.db_path)


async def shutdown_dependencies() -> None:
    """Close and reset the singletons. Safe to call more than once."""
    global _db, _settings

    if _db is not None:
        await _db.close()
        _db = None
    _settings = None
