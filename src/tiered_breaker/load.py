"""Scripted load profile for exercising the breaker end to end.

One client sends ``per_minute`` requests per minute for six minutes. Errors
are flagged on a fixed schedule so the run walks the breaker down to
maintenance and back:

    minute 1   first 5 of 20 requests flagged
    minute 3   first 15 of 20 requests flagged
    minute 5   first 15 of 20 requests flagged
    otherwise  no requests flagged
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable

from .client import BreakerClient

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 140
DEFAULT_INTERVAL = 3.0
DEFAULT_PER_MINUTE = 20

# minute -> number of leading requests flagged as errors
ERROR_BURSTS: dict[int, int] = {1: 5, 3: 15, 5: 15}


def minute_of(iteration: int, per_minute: int = DEFAULT_PER_MINUTE) -> int:
    """One-based minute an iteration falls in."""
    return iteration // per_minute + 1


def error_schedule(iteration: int, per_minute: int = DEFAULT_PER_MINUTE) -> bool:
    """Whether the request at this zero-based iteration carries the error flag."""
    if iteration < 0:
        raise ValueError(f"iteration must be >= 0, got {iteration}")
    if per_minute < 1:
        raise ValueError(f"per_minute must be >= 1, got {per_minute}")
    flagged = ERROR_BURSTS.get(minute_of(iteration, per_minute), 0)
    # Burst sizes are given per 20 requests
    flagged = flagged * per_minute // DEFAULT_PER_MINUTE
    return iteration % per_minute < flagged


@dataclass(frozen=True)
class LoadSample:
    """One request sent during a load run."""

    iteration: int
    minute: int
    error: bool
    status: int
    tier: int
    message: str


@dataclass
class LoadReport:
    """Collected samples of a load run."""

    samples: list[LoadSample] = field(default_factory=list)

    @property
    def status_counts(self) -> dict[int, int]:
        return dict(Counter(sample.status for sample in self.samples))

    @property
    def tiers_seen(self) -> list[int]:
        """Tiers in the order they were first observed."""
        seen: list[int] = []
        for sample in self.samples:
            if sample.tier not in seen:
                seen.append(sample.tier)
        return seen

    @property
    def final_tier(self) -> int | None:
        return self.samples[-1].tier if self.samples else None


async def run_load(
    client: BreakerClient,
    iterations: int = DEFAULT_ITERATIONS,
    interval: float = DEFAULT_INTERVAL,
    per_minute: int = DEFAULT_PER_MINUTE,
    on_sample: Callable[[LoadSample], None] | None = None,
) -> LoadReport:
    """Drive the error schedule against a running breaker API.

    Requests are sent one at a time with ``interval`` seconds between them.

    Args:
        client: Connected breaker client.
        iterations: Number of requests to send.
        interval: Seconds to wait after each request.
        per_minute: Requests per scheduled minute.
        on_sample: Optional callback invoked after every request.

    Returns:
        LoadReport with one sample per request.
    """
    report = LoadReport()
    for iteration in range(iterations):
        error = error_schedule(iteration, per_minute)
        outcome = await client.send(error=error)
        sample = LoadSample(
            iteration=iteration,
            minute=minute_of(iteration, per_minute),
            error=error,
            status=int(outcome["status"]),
            tier=int(outcome["tier"]),
            message=str(outcome["message"]),
        )
        report.samples.append(sample)
        logger.debug(
            "Minute %d, iteration %d, error=%s -> %d tier %d",
            sample.minute,
            iteration + 1,
            error,
            sample.status,
            sample.tier,
        )
        if on_sample is not None:
            on_sample(sample)
        if interval > 0 and iteration < iterations - 1:
            await asyncio.sleep(interval)

    logger.info("Load run finished: %d requests, statuses %s", iterations, report.status_counts)
    return report
