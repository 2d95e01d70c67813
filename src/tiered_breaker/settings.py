"""Runtime settings for the tiered breaker.

Settings come from an optional TOML file and two environment variables:

    TIERED_BREAKER_CONFIG   path to the TOML file
    TIERED_BREAKER_DB_PATH  database path, overrides the file

Example file::

    [breaker]
    db_path = "breaker.db"

    [thresholds]
    degrade_to_degraded = 5
    degrade_to_maintenance = 10
    recovery_threshold = 10

    [server]
    host = "127.0.0.1"
    port = 8430
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .breaker_config import HysteresisConfig
from .database import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

ENV_DB_PATH = "TIERED_BREAKER_DB_PATH"
ENV_CONFIG_PATH = "TIERED_BREAKER_CONFIG"


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8430
    log_level: str = "info"


@dataclass(frozen=True)
class BreakerSettings:
    """Complete runtime configuration."""

    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    hysteresis: HysteresisConfig = field(default_factory=HysteresisConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_settings(config_path: Path) -> BreakerSettings:
    """Load settings from a TOML file.

    Args:
        config_path: Path to the TOML file.

    Returns:
        Parsed BreakerSettings.

    Raises:
        FileNotFoundError: If the file is missing.
        ValueError: On empty or invalid TOML, or out-of-range values.
    """
    if not config_path.exists():
        msg = f"Breaker config not found: {config_path}"
        raise FileNotFoundError(msg)

    content = config_path.read_text(encoding="utf-8")
    if not content.strip():
        msg = f"Config file is empty: {config_path}"
        raise ValueError(msg)

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_path}: {exc}"
        raise ValueError(msg) from exc

    return _parse_settings(data, config_path.resolve().parent)


def _table(data: dict[str, object], name: str) -> dict[str, object]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        msg = f"[{name}] section must be a table"
        raise ValueError(msg)
    return value


def _int(table: dict[str, object], key: str, default: int) -> int:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{key} must be an integer, got {value!r}"
        raise ValueError(msg)
    return value


def _parse_settings(data: dict[str, object], base_dir: Path) -> BreakerSettings:
    """Parse raw TOML data into BreakerSettings.

    Unknown fields are silently ignored for forward compatibility.
    """
    breaker = _table(data, "breaker")
    thresholds = _table(data, "thresholds")
    server = _table(data, "server")

    defaults = HysteresisConfig()
    hysteresis = HysteresisConfig(
        degrade_to_degraded=_int(thresholds, "degrade_to_degraded", defaults.degrade_to_degraded),
        degrade_to_maintenance=_int(
            thresholds, "degrade_to_maintenance", defaults.degrade_to_maintenance
        ),
        recovery_threshold=_int(thresholds, "recovery_threshold", defaults.recovery_threshold),
    )

    db_path = DEFAULT_DB_PATH
    raw_db_path = breaker.get("db_path")
    if raw_db_path is not None:
        if not isinstance(raw_db_path, str) or not raw_db_path:
            msg = "breaker.db_path must be a non-empty string"
            raise ValueError(msg)
        db_path = Path(raw_db_path)
        if not db_path.is_absolute():
            db_path = base_dir / db_path

    port = _int(server, "port", ServerConfig.port)
    if not 1 <= port <= 65535:
        msg = f"server.port must be between 1 and 65535, got {port}"
        raise ValueError(msg)

    return BreakerSettings(
        db_path=db_path,
        hysteresis=hysteresis,
        server=ServerConfig(
            host=str(server.get("host", ServerConfig.host)),
            port=port,
            log_level=str(server.get("log_level", ServerConfig.log_level)),
        ),
    )


def resolve_settings(
    config_path: str | Path | None = None,
    db_path: str | Path | None = None,
) -> BreakerSettings:
    """Resolve settings from arguments, environment and the optional TOML file.

    Precedence for the database path: db_path argument, then
    TIERED_BREAKER_DB_PATH, then the file, then the default.

    Args:
        config_path: TOML file; falls back to TIERED_BREAKER_CONFIG.
        db_path: Explicit database path.
    """
    config_path = config_path or os.environ.get(ENV_CONFIG_PATH)
    settings = load_settings(Path(config_path)) if config_path else BreakerSettings()

    override = db_path or os.environ.get(ENV_DB_PATH)
    if override:
        settings = BreakerSettings(
            db_path=Path(override),
            hysteresis=settings.hysteresis,
            server=settings.server,
        )

    logger.debug("Resolved breaker settings: db_path=%s", settings.db_path)
    return settings
