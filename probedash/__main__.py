"""Entry point: python -m probedash"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .app import ProbeDashboard
from .config import DashboardConfig, apply_overrides, get_log_path, load_config
from .demo import DemoActorProbe, DemoFiberProbe, DemoPoolProbe
from .engine import DashboardEngine
from .events import TabKind
from .exceptions import ConfigError
from .poller import PollerGroup
from .probes import ActorProbe, FiberProbe, PoolProbe


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="probedash",
        description="Live terminal dashboard for fiber schedulers, connection pools and actor systems",
    )
    parser.add_argument("--config", type=Path,
                        help="Path to config.yaml (default: .probedash/config.yaml)")
    parser.add_argument("--fibers", type=str,
                        help="Base URL of the fiber dump endpoint")
    parser.add_argument("--pool", type=str,
                        help="Jolokia URL exposing the connection pool MBeans")
    parser.add_argument("--executor", type=str,
                        help="Name of the query executor MBean")
    parser.add_argument("--connection-pool", type=str,
                        help="Name of the connection pool, if one sits behind the executor")
    parser.add_argument("--actors", type=str,
                        help="Base URL of the actor tree endpoint")
    parser.add_argument("--refresh", type=float,
                        help="Polling interval in seconds")
    parser.add_argument("--demo", action="store_true",
                        help="Run with synthetic data for every source")
    parser.add_argument("--verbose", action="store_true",
                        help="Log at DEBUG level")
    return parser


def build_dashboard(config: DashboardConfig, demo: bool = False) -> tuple[DashboardEngine, PollerGroup]:
    """Create the engine plus one poller per configured source."""
    pollers = PollerGroup()
    interval = config.refresh_interval
    timeout = config.request_timeout
    token = config.api_token

    if demo:
        engine = DashboardEngine("probedash [DEMO]", fibers=True, pool=True, actors=True,
                                 retention=config.retention)
        pollers.add(TabKind.FIBERS, DemoFiberProbe().poll, interval)
        pollers.add(TabKind.POOL, DemoPoolProbe().poll, interval)
        pollers.add(TabKind.ACTORS, DemoActorProbe().poll, interval)
        return engine, pollers

    engine = DashboardEngine(
        "probedash",
        fibers=config.fibers_url is not None,
        pool=config.pool is not None,
        actors=config.actors_url is not None,
        retention=config.retention,
    )
    if config.fibers_url:
        pollers.add(TabKind.FIBERS, FiberProbe(config.fibers_url, timeout, token).poll, interval)
    if config.pool:
        probe = PoolProbe(
            config.pool.url,
            executor=config.pool.executor,
            connection_pool=config.pool.connection_pool,
            timeout=timeout,
            token=token,
        )
        pollers.add(TabKind.POOL, probe.poll, interval)
    if config.actors_url:
        pollers.add(TabKind.ACTORS, ActorProbe(config.actors_url, timeout, token).poll, interval)
    return engine, pollers


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_path = get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_path),
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("probedash")

    try:
        config = load_config(args.config)
        config = apply_overrides(
            config,
            fibers_url=args.fibers,
            pool_url=args.pool,
            executor=args.executor,
            connection_pool=args.connection_pool,
            actors_url=args.actors,
            refresh_interval=args.refresh,
        )
    except ConfigError as e:
        parser.error(str(e))

    if not args.demo and not config.has_sources:
        parser.error("no data sources configured; pass --fibers, --pool or --actors "
                     "(or set them in config.yaml), or use --demo")

    engine, pollers = build_dashboard(config, demo=args.demo)
    try:
        reason = ProbeDashboard(engine, pollers).run()
    except Exception:
        logger.exception("Dashboard crashed")
        raise
    finally:
        pollers.stop()

    if reason:
        print(reason, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
