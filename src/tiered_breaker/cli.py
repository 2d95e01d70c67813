"""CLI for the tiered breaker.

Local commands (state, reset, send, events) operate directly on the breaker
database; load drives a running API server; serve starts one.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
import httpx

from .breaker import StateMutator, StateReader
from .client import BreakerClient, ClientError
from .database import BreakerDB
from .exceptions import StorageUnavailable
from .load import DEFAULT_INTERVAL, DEFAULT_ITERATIONS, LoadSample, run_load
from .models import ServiceRequest
from .settings import BreakerSettings, resolve_settings
from .workflow import RequestWorkflow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

TIER_ICONS = {1: "[OK]", 2: "[~]", 3: "[X]"}

db_option = click.option("--db", type=click.Path(), help="Database path")
config_option = click.option("--config", type=click.Path(), help="TOML config file")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Tiered Breaker - three-tier circuit breaker with hysteresis."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _settings_or_exit(config: str | None, db: str | None) -> BreakerSettings:
    try:
        return resolve_settings(config_path=config, db_path=db)
    except (FileNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _run_or_exit(coro: Any) -> Any:
    """Run a coroutine, turning storage failures into a non-zero exit."""
    try:
        return asyncio.run(coro)
    except StorageUnavailable as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@cli.command()
@db_option
@config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def state(db: str | None, config: str | None, as_json: bool) -> None:
    """Show the current breaker record."""
    settings = _settings_or_exit(config, db)
    record = _run_or_exit(_state_async(settings))

    if as_json:
        click.echo(json.dumps(record, indent=2))
        return

    icon = TIER_ICONS.get(record["tier"], "?")
    click.echo(f"{icon} Tier {record['tier']} ({record['tier_label']})")
    click.echo(f"  Error count:     {record['error_count']}")
    click.echo(f"  Recovery points: {record['recovery_points']}")
    click.echo(f"  Last updated:    {record['last_updated'] or 'never'}")


async def _state_async(settings: BreakerSettings) -> dict[str, Any]:
    async with BreakerDB(settings.db_path) as db:
        record = await StateReader(db).read()
    return record.to_dict()


@cli.command()
@db_option
@config_option
@click.confirmation_option(prompt="Reset the breaker to Full Capacity?")
def reset(db: str | None, config: str | None) -> None:
    """Force the breaker back to full capacity with cleared counters."""
    settings = _settings_or_exit(config, db)
    result = _run_or_exit(_reset_async(settings))
    click.echo(f"{result['message']} (was tier {result['previous_tier']})")


async def _reset_async(settings: BreakerSettings) -> dict[str, Any]:
    async with BreakerDB(settings.db_path) as db:
        result = await StateMutator(db, settings.hysteresis).reset()
    return result.to_dict()


@cli.command()
@db_option
@config_option
@click.option("--error", is_flag=True, help="Ask the full capacity handler to fail")
def send(db: str | None, config: str | None, error: bool) -> None:
    """Run one request through the breaker against the local database."""
    settings = _settings_or_exit(config, db)
    outcome = _run_or_exit(_send_async(settings, error))
    click.echo(json.dumps(outcome, indent=2))
    if outcome["status"] >= 500:
        sys.exit(2)


async def _send_async(settings: BreakerSettings, error: bool) -> dict[str, Any]:
    async with BreakerDB(settings.db_path) as db:
        response = await RequestWorkflow(db, settings.hysteresis).handle(
            ServiceRequest(error=error)
        )
    return response.to_dict()


@cli.command()
@db_option
@config_option
@click.option("--limit", "-n", default=20, type=click.IntRange(1, 500), help="Events to show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def events(db: str | None, config: str | None, limit: int, as_json: bool) -> None:
    """Show recent tier changes and resets, newest first."""
    settings = _settings_or_exit(config, db)
    rows = _run_or_exit(_events_async(settings, limit))

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No breaker events recorded.")
        return

    for row in rows:
        click.echo(
            f"  {row['created_at']}  {row['action']:<7} "
            f"{row['from_tier']} -> {row['to_tier']} ({row['direction']})"
        )


async def _events_async(settings: BreakerSettings, limit: int) -> list[dict[str, Any]]:
    async with BreakerDB(settings.db_path) as db:
        return await db.fetch_breaker_events(limit=limit)


@cli.command()
@click.option("--url", default="http://127.0.0.1:8430", help="Breaker API base URL")
@click.option("--iterations", default=DEFAULT_ITERATIONS, type=click.IntRange(min=1))
@click.option(
    "--interval",
    default=DEFAULT_INTERVAL,
    type=click.FloatRange(min=0.0),
    help="Seconds between requests",
)
def load(url: str, iterations: int, interval: float) -> None:
    """Replay the six-minute error schedule against a running server."""

    def echo_sample(sample: LoadSample) -> None:
        click.echo(
            f"Minute: {sample.minute}, Iteration: {sample.iteration + 1}, "
            f"Error: {sample.error}, Status: {sample.status}, "
            f"Tier: {sample.tier}, Message: {sample.message}"
        )

    async def _load_async() -> dict[int, int]:
        async with BreakerClient(base_url=url) as client:
            report = await run_load(
                client, iterations=iterations, interval=interval, on_sample=echo_sample
            )
        return report.status_counts

    try:
        counts = asyncio.run(_load_async())
    except (ClientError, httpx.HTTPError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    summary = ", ".join(f"{status}: {count}" for status, count in sorted(counts.items()))
    click.echo(f"Done. Statuses: {summary}")


@cli.command()
@db_option
@config_option
@click.option("--host", default=None, help="Bind host (default: from config)")
@click.option("--port", default=None, type=int, help="Bind port (default: from config)")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(
    db: str | None,
    config: str | None,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """Start the breaker API server."""
    from .api.serve import run_server

    settings = _settings_or_exit(config, db)
    run_server(
        host=host or settings.server.host,
        port=port or settings.server.port,
        log_level=settings.server.log_level,
        reload=reload,
        db_path=str(settings.db_path),
        config_path=config,
    )


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
