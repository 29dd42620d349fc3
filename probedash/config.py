"""Configuration loading and constants for the dashboard."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# History retention windows (samples kept per buffer)
# ---------------------------------------------------------------------------

DEFAULT_RETENTION = {
    "fiber_tallies": 100,
    "pool_metrics": 25,
    "connection_metrics": 100,
    "actor_counts": 25,
}

DEFAULT_REFRESH_INTERVAL = 2.0
DEFAULT_REQUEST_TIMEOUT = 5.0
DEFAULT_EXECUTOR = "AsyncExecutor"

CONFIG_ENV_VAR = "PROBEDASH_CONFIG"
TOKEN_ENV_VAR = "PROBEDASH_API_TOKEN"


def get_dashboard_dir() -> Path:
    """Get the .probedash directory in the current working directory."""
    return Path.cwd() / ".probedash"


def get_config_path() -> Path:
    """Get path to config.yaml.

    Can be overridden via the PROBEDASH_CONFIG environment variable.
    """
    env_override = os.environ.get(CONFIG_ENV_VAR)
    if env_override:
        return Path(env_override)
    return get_dashboard_dir() / "config.yaml"


def get_log_path() -> Path:
    return get_dashboard_dir() / "logs" / "dashboard.log"


@dataclass(frozen=True)
class Retention:
    fiber_tallies: int = DEFAULT_RETENTION["fiber_tallies"]
    pool_metrics: int = DEFAULT_RETENTION["pool_metrics"]
    connection_metrics: int = DEFAULT_RETENTION["connection_metrics"]
    actor_counts: int = DEFAULT_RETENTION["actor_counts"]


@dataclass(frozen=True)
class PoolSettings:
    url: str
    executor: str = DEFAULT_EXECUTOR
    connection_pool: str | None = None


@dataclass(frozen=True)
class DashboardConfig:
    """Everything the CLI needs to wire probes, pollers and the engine.

    A source set to None has no tab for the whole run.
    """

    fibers_url: str | None = None
    pool: PoolSettings | None = None
    actors_url: str | None = None
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    api_token: str | None = None
    retention: Retention = field(default_factory=Retention)

    @property
    def has_sources(self) -> bool:
        return any((self.fibers_url, self.pool, self.actors_url))


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return value


def _positive_number(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be a number, got {value!r}") from None
    if number <= 0:
        raise ConfigError(f"'{name}' must be positive, got {value!r}")
    return number


def _parse_retention(raw: dict[str, Any]) -> Retention:
    values = dict(DEFAULT_RETENTION)
    for key, value in raw.items():
        if key not in values:
            raise ConfigError(f"unknown retention window: {key}")
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"retention.{key} must be an integer >= 1, got {value!r}")
        values[key] = value
    return Retention(**values)


def parse_config(raw: dict[str, Any] | None) -> DashboardConfig:
    """Build a DashboardConfig from the parsed YAML document."""
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError("config root must be a mapping")

    fibers = _section(raw, "fibers")
    pool = _section(raw, "pool")
    actors = _section(raw, "actors")

    pool_settings = None
    if pool.get("url"):
        pool_settings = PoolSettings(
            url=str(pool["url"]),
            executor=str(pool.get("executor") or DEFAULT_EXECUTOR),
            connection_pool=pool.get("connection_pool") or None,
        )

    return DashboardConfig(
        fibers_url=fibers.get("url") or None,
        pool=pool_settings,
        actors_url=actors.get("url") or None,
        refresh_interval=_positive_number(
            raw.get("refresh_interval", DEFAULT_REFRESH_INTERVAL), "refresh_interval"),
        request_timeout=_positive_number(
            raw.get("request_timeout", DEFAULT_REQUEST_TIMEOUT), "request_timeout"),
        api_token=raw.get("api_token") or os.getenv(TOKEN_ENV_VAR),
        retention=_parse_retention(_section(raw, "retention")),
    )


def load_config(path: Path | None = None) -> DashboardConfig:
    """Load config.yaml, falling back to defaults when the file does not exist."""
    config_path = path or get_config_path()
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"config file not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return parse_config({})

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"failed to load {config_path}: {e}") from e
    return parse_config(raw)


def apply_overrides(
    config: DashboardConfig,
    *,
    fibers_url: str | None = None,
    pool_url: str | None = None,
    executor: str | None = None,
    connection_pool: str | None = None,
    actors_url: str | None = None,
    refresh_interval: float | None = None,
) -> DashboardConfig:
    """Return a copy of ``config`` with command-line values taking precedence."""
    updates: dict[str, Any] = {}
    if fibers_url:
        updates["fibers_url"] = fibers_url
    if actors_url:
        updates["actors_url"] = actors_url
    if refresh_interval is not None:
        updates["refresh_interval"] = _positive_number(refresh_interval, "refresh")

    pool = config.pool
    if pool_url:
        pool = replace(pool, url=pool_url) if pool else PoolSettings(url=pool_url)
    if pool and executor:
        pool = replace(pool, executor=executor)
    if pool and connection_pool:
        pool = replace(pool, connection_pool=connection_pool)
    if pool is not config.pool:
        updates["pool"] = pool

    return replace(config, **updates) if updates else config
