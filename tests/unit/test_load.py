"""Tests for the scripted load profile."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from tiered_breaker.load import LoadSample, error_schedule, minute_of, run_load


class TestErrorSchedule:
    """The six-minute error pattern."""

    def test_minute_numbering(self) -> None:
        assert minute_of(0) == 1
        assert minute_of(19) == 1
        assert minute_of(20) == 2
        assert minute_of(139) == 7

    def test_flag_counts_per_minute(self) -> None:
        flagged = {}
        for i in range(140):
            flagged.setdefault(minute_of(i), 0)
            flagged[minute_of(i)] += error_schedule(i)
        assert flagged == {1: 5, 2: 0, 3: 15, 4: 0, 5: 15, 6: 0, 7: 0}

    def test_flags_lead_each_burst(self) -> None:
        assert [error_schedule(i) for i in range(6)] == [True] * 5 + [False]
        assert error_schedule(40 + 14) is True
        assert error_schedule(40 + 15) is False

    def test_scales_with_rate(self) -> None:
        assert sum(error_schedule(i, per_minute=40) for i in range(40)) == 10

    def test_rejects_negative_iteration(self) -> None:
        with pytest.raises(ValueError):
            error_schedule(-1)


class TestRunLoad:
    """Tests for run_load with a stubbed client."""

    async def test_sends_schedule_and_collects_samples(self) -> None:
        client = MagicMock()
        client.send = AsyncMock(
            side_effect=lambda error: {
                "status": 500 if error else 200,
                "tier": 1,
                "message": "x",
            }
        )
        seen: list[LoadSample] = []

        report = await run_load(client, iterations=25, interval=0, on_sample=seen.append)

        assert len(report.samples) == 25
        assert len(seen) == 25
        sent_flags = [call.kwargs["error"] for call in client.send.await_args_list]
        assert sent_flags == [error_schedule(i) for i in range(25)]
        assert report.status_counts == {500: 5, 200: 20}
        assert report.final_tier == 1

    async def test_tiers_seen_in_order(self) -> None:
        tiers = iter([1, 1, 2, 2, 3, 2])
        client = MagicMock()
        client.send = AsyncMock(
            side_effect=lambda error: {"status": 200, "tier": next(tiers), "message": "m"}
        )

        report = await run_load(client, iterations=6, interval=0)

        assert report.tiers_seen == [1, 2, 3]
