"""Breaker state persistence operations.

Every method here is atomic against the singleton breaker_state row (or an
append to breaker_events). Most are a single statement; the success path
reads and writes inside one IMMEDIATE transaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from ..models import BREAKER_KEY
from .connection import storage_errors

if TYPE_CHECKING:
    import asyncio

    import aiosqlite

logger = logging.getLogger(__name__)

_STATE_COLUMNS = "tier, error_count, recovery_points, last_updated, version"


class BreakerStateMixin:
    """Mixin providing atomic operations on the breaker record."""

    _write_lock: asyncio.Lock

    async def _ensure_connected(self) -> aiosqlite.Connection: ...

    async def fetch_breaker_row(self, key: str = BREAKER_KEY) -> dict[str, Any] | None:
        """Point read of the breaker record.

        Args:
            key: Record key.

        Returns:
            Row as a dict, or None if no record is stored.
        """
        conn = await self._ensure_connected()
        with storage_errors("read"):
            async with conn.execute(
                f"SELECT {_STATE_COLUMNS} FROM breaker_state WHERE key = ?",
                (key,),
            ) as cursor:
                row = await cursor.fetchone()
        return dict(row) if row else None

    async def increment_error_count(self, now: str, key: str = BREAKER_KEY) -> dict[str, Any]:
        """Atomically add one error and break any recovery streak.

        Creates the record at tier 1 if it does not exist yet. The returned
        tier is untouched by this statement, so it is the tier before the
        failure was counted.

        Args:
            now: ISO-8601 timestamp of the mutation.
            key: Record key.

        Returns:
            The row as it is after the increment.
        """
        conn = await self._ensure_connected()
        with storage_errors("increment_error_count"):
            async with self._write_lock:
                cursor = await conn.execute(
                    f"""
                    INSERT INTO breaker_state
                        (key, tier, error_count, recovery_points, last_updated, version)
                    VALUES (?, 1, 1, 0, ?, 1)
                    ON CONFLICT(key) DO UPDATE SET
                        error_count = breaker_state.error_count + 1,
                        recovery_points = 0,
                        last_updated = excluded.last_updated,
                        version = breaker_state.version + 1
                    RETURNING {_STATE_COLUMNS}
                    """,
                    (key, now),
                )
                rows = await cursor.fetchall()
                await conn.commit()
        return dict(rows[0])

    async def raise_tier(self, target: int, now: str, key: str = BREAKER_KEY) -> bool:
        """Move the record to a worse tier, never to a better one.

        Two racing failures that both decide on the same target produce one
        effective write; the second finds the tier already there and is a
        no-op.

        Args:
            target: Tier to move to.
            now: ISO-8601 timestamp of the mutation.
            key: Record key.

        Returns:
            True if the stored tier was raised by this call.
        """
        conn = await self._ensure_connected()
        with storage_errors("raise_tier"):
            async with self._write_lock:
                cursor = await conn.execute(
                    """
                    UPDATE breaker_state
                    SET tier = ?, last_updated = ?, version = version + 1
                    WHERE key = ? AND tier < ?
                    """,
                    (target, now, key, target),
                )
                await conn.commit()
                return cursor.rowcount > 0

    async def apply_success_state(
        self,
        decide: Callable[[dict[str, Any]], tuple[int, int, int]],
        now: str,
        key: str = BREAKER_KEY,
    ) -> tuple[dict[str, Any] | None, dict[str, Any]]:
        """Read, decide and write the record inside one IMMEDIATE transaction.

        The write lock on the file is taken before the read, so no other
        writer can change the record between the read and the update. A
        missing record is created with default values and ``decide`` is not
        called.

        Args:
            decide: Maps the stored row to (tier, error_count, recovery_points).
            now: ISO-8601 timestamp of the mutation.
            key: Record key.

        Returns:
            (row before, row after). The first item is None if this call
            created the record.
        """
        conn = await self._ensure_connected()
        with storage_errors("apply_success"):
            async with self._write_lock:
                await conn.execute("BEGIN IMMEDIATE")
                try:
                    async with conn.execute(
                        f"SELECT {_STATE_COLUMNS} FROM breaker_state WHERE key = ?",
                        (key,),
                    ) as cursor:
                        row = await cursor.fetchone()
                    before = dict(row) if row else None

                    if before is None:
                        cursor = await conn.execute(
                            f"""
                            INSERT INTO breaker_state
                                (key, tier, error_count, recovery_points, last_updated, version)
                            VALUES (?, 1, 0, 0, ?, 1)
                            RETURNING {_STATE_COLUMNS}
                            """,
                            (key, now),
                        )
                    else:
                        tier, error_count, recovery_points = decide(before)
                        cursor = await conn.execute(
                            f"""
                            UPDATE breaker_state
                            SET tier = ?,
                                error_count = ?,
                                recovery_points = ?,
                                last_updated = ?,
                                version = version + 1
                            WHERE key = ?
                            RETURNING {_STATE_COLUMNS}
                            """,
                            (tier, error_count, recovery_points, now, key),
                        )
                    rows = await cursor.fetchall()
                except BaseException:
                    await conn.rollback()
                    raise
                await conn.commit()
        return before, dict(rows[0])

    async def reset_breaker_state(self, now: str, key: str = BREAKER_KEY) -> dict[str, Any]:
        """Unconditionally reinitialize the record to full capacity.

        Returns:
            The row as it is after the reset.
        """
        conn = await self._ensure_connected()
        with storage_errors("reset"):
            async with self._write_lock:
                cursor = await conn.execute(
                    f"""
                    INSERT INTO breaker_state
                        (key, tier, error_count, recovery_points, last_updated, version)
                    VALUES (?, 1, 0, 0, ?, 1)
                    ON CONFLICT(key) DO UPDATE SET
                        tier = 1,
                        error_count = 0,
                        recovery_points = 0,
                        last_updated = excluded.last_updated,
                        version = breaker_state.version + 1
                    RETURNING {_STATE_COLUMNS}
                    """,
                    (key, now),
                )
                rows = await cursor.fetchall()
                await conn.commit()
        return dict(rows[0])

    async def record_breaker_event(
        self,
        *,
        action: str,
        from_tier: int,
        to_tier: int,
        error_count: int,
        recovery_points: int,
        created_at: str,
    ) -> None:
        """Append a tier change or reset to the audit trail."""
        conn = await self._ensure_connected()
        with storage_errors("record_event"):
            async with self._write_lock:
                await conn.execute(
                    """
                    INSERT INTO breaker_events
                    (action, from_tier, to_tier, error_count, recovery_points, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (action, from_tier, to_tier, error_count, recovery_points, created_at),
                )
                await conn.commit()

    async def fetch_breaker_events(self, limit: int = 20) -> list[dict[str, Any]]:
        """Return the most recent audit events, newest first.

        Args:
            limit: Maximum number of events to return.
        """
        conn = await self._ensure_connected()
        with storage_errors("read_events"):
            async with conn.execute(
                """
                SELECT id, action, from_tier, to_tier, direction,
                       error_count, recovery_points, created_at
                FROM v_tier_changes
                LIMIT ?
                """,
                (limit,),
            ) as cursor:
                rows = await cursor.fetchall()
        return [dict(row) for row in rows]
