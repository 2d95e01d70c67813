"""Server runner module for the tiered breaker API.

Provides a run_server utility that configures and starts uvicorn
with appropriate defaults.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Iterator

import uvicorn

from tiered_breaker.settings import ENV_CONFIG_PATH, ENV_DB_PATH


@contextmanager
def _temporary_env_var(name: str, value: str | None) -> Iterator[None]:
    """Temporarily set an environment variable, restoring original state on exit."""
    if value is None:
        yield
        return
    old_value = os.environ.get(name)
    was_set = name in os.environ
    os.environ[name] = value
    try:
        yield
    finally:
        if was_set and old_value is not None:
            os.environ[name] = old_value
        elif not was_set:
            os.environ.pop(name, None)


def run_server(
    host: str = "127.0.0.1",
    port: int = 8430,
    log_level: str = "info",
    reload: bool = False,
    db_path: str | None = None,
    config_path: str | None = None,
    **kwargs: Any,
) -> None:
    """Run the tiered breaker API server.

    The app is built by factory inside uvicorn, so the database and config
    paths travel through the environment.

    Args:
        host: The host to bind to.
        port: The port to bind to.
        log_level: The log level for uvicorn.
        reload: Whether to enable auto-reload.
        db_path: Optional database path, exported as TIERED_BREAKER_DB_PATH.
        config_path: Optional TOML config, exported as TIERED_BREAKER_CONFIG.
        **kwargs: Additional keyword arguments to forward to uvicorn.run.
    """
    with (
        _temporary_env_var(ENV_DB_PATH, db_path),
        _temporary_env_var(ENV_CONFIG_PATH, config_path),
    ):
        uvicorn.run(
            "tiered_breaker.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            log_level=log_level,
            reload=reload,
            **kwargs,
        )
