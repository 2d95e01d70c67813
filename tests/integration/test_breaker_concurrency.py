"""Concurrency tests: racing callers share nothing but the database file."""

from __future__ import annotations

import asyncio
from collections import Counter

import pytest

from tiered_breaker.breaker import StateMutator, StateReader
from tiered_breaker.breaker_config import HysteresisConfig, Tier
from tiered_breaker.database import BreakerDB
from tiered_breaker.models import ServiceRequest
from tiered_breaker.workflow import RequestWorkflow

# Threshold high enough that only counters move during success races
NO_PROMOTION = HysteresisConfig(recovery_threshold=1000)


async def _seed_degraded(db: BreakerDB) -> None:
    now = "2024-01-01T00:00:00+00:00"
    await db.reset_breaker_state(now)
    await db.apply_success_state(lambda row: (2, 5, 0), now)


async def _count_records(db: BreakerDB) -> int:
    conn = await db._ensure_connected()
    async with conn.execute("SELECT COUNT(*) AS n FROM breaker_state") as cursor:
        row = await cursor.fetchone()
    return int(row["n"])


class TestConcurrentFailures:
    """Racing failures never lose an increment."""

    async def test_single_connection(self, file_db: BreakerDB) -> None:
        mutator = StateMutator(file_db)

        await asyncio.gather(*(mutator.apply_failure() for _ in range(25)))

        record = await StateReader(file_db).read()
        assert record.error_count == 25

    async def test_two_connections(self, two_connections) -> None:
        first, second = two_connections
        mutators = [StateMutator(first), StateMutator(second)]

        await asyncio.gather(*(mutators[i % 2].apply_failure() for i in range(30)))

        record = await StateReader(first).read()
        assert record.error_count == 30
        assert record.tier in (Tier.DEGRADED, Tier.MAINTENANCE)

    async def test_each_degrade_logged_once(self, two_connections) -> None:
        """Racing failures that both decide to raise the tier produce one effective write."""
        first, second = two_connections
        mutators = [StateMutator(first), StateMutator(second)]

        await asyncio.gather(*(mutators[i % 2].apply_failure() for i in range(30)))

        events = await first.fetch_breaker_events(limit=100)
        pairs = Counter((e["from_tier"], e["to_tier"]) for e in events)
        assert pairs[(1, 2)] == 1
        assert all(count == 1 for count in pairs.values())


class TestConcurrentSuccesses:
    """Every success is applied exactly once even when writers collide."""

    async def test_no_lost_recovery_points(self, two_connections) -> None:
        first, second = two_connections
        await _seed_degraded(first)
        mutators = [StateMutator(first, NO_PROMOTION), StateMutator(second, NO_PROMOTION)]

        await asyncio.gather(*(mutators[i % 2].apply_success() for i in range(20)))

        record = await StateReader(first).read()
        assert record.tier is Tier.DEGRADED
        assert record.recovery_points == 20

    async def test_default_config_requests_all_served(self, file_db: BreakerDB) -> None:
        """
        GIVEN a degraded breaker and the default thresholds
        WHEN 20 genuine requests are handled concurrently
        THEN every request is served, the breaker promotes once and ends clean
        """
        await _seed_degraded(file_db)
        workflow = RequestWorkflow(file_db)

        responses = await asyncio.gather(
            *(workflow.handle(ServiceRequest(error=False)) for _ in range(20))
        )

        assert [r.status for r in responses] == [200] * 20
        record = await StateReader(file_db).read()
        assert (record.tier, record.error_count, record.recovery_points) == (
            Tier.FULL_CAPACITY,
            0,
            0,
        )
        events = await file_db.fetch_breaker_events(limit=100)
        assert [(e["from_tier"], e["to_tier"]) for e in events] == [(2, 1)]

    async def test_default_config_across_connections(self, two_connections) -> None:
        first, second = two_connections
        await _seed_degraded(first)
        mutators = [StateMutator(first), StateMutator(second)]

        results = await asyncio.gather(*(mutators[i % 2].apply_success() for i in range(20)))

        assert sum(r.changed for r in results) == 1
        record = await StateReader(second).read()
        assert (record.tier, record.error_count, record.recovery_points) == (
            Tier.FULL_CAPACITY,
            0,
            0,
        )

    async def test_first_successes_create_one_record(self, two_connections) -> None:
        first, second = two_connections
        mutators = [StateMutator(first), StateMutator(second)]

        results = await asyncio.gather(*(mutators[i % 2].apply_success() for i in range(6)))

        assert all(r.tier is Tier.FULL_CAPACITY for r in results)
        assert await _count_records(first) == 1

    async def test_mixed_traffic_keeps_counters_valid(self, two_connections) -> None:
        first, second = two_connections
        await _seed_degraded(first)
        config = HysteresisConfig()
        mutators = [StateMutator(first, config), StateMutator(second, config)]

        calls = []
        for i in range(40):
            mutator = mutators[i % 2]
            if i % 4 == 0:
                calls.append(mutator.apply_failure())
            else:
                calls.append(mutator.apply_success(had_error_flag=i % 3 == 0))
        await asyncio.gather(*calls)

        record = await StateReader(first).read()
        assert record.error_count >= 0
        assert record.recovery_points >= 0
        assert record.recovery_points < config.recovery_threshold


@pytest.mark.slow
class TestSustainedContention:
    async def test_many_failures_across_connections(self, two_connections) -> None:
        first, second = two_connections
        mutators = [StateMutator(first), StateMutator(second)]

        await asyncio.gather(*(mutators[i % 2].apply_failure() for i in range(400)))

        record = await StateReader(second).read()
        assert record.error_count == 400
        assert record.tier is Tier.MAINTENANCE
