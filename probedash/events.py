"""Messages flowing into the dashboard engine.

Snapshot updates travel from the poller threads through the channels; keys
come from the terminal. ``ProbeFailed`` shares the channels but is consumed by
the app, never by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from .models import ActorNode, ConnectionMetrics, Fiber, PoolConfig, PoolMetrics


class TabKind(Enum):
    FIBERS = "fibers"
    POOL = "pool"
    ACTORS = "actors"


class Key(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    QUIT = "quit"


@dataclass(frozen=True)
class FiberDumpUpdate:
    kind: ClassVar[TabKind] = TabKind.FIBERS
    fibers: tuple[Fiber, ...]


@dataclass(frozen=True)
class FiberTallyUpdate:
    kind: ClassVar[TabKind] = TabKind.FIBERS
    fibers: tuple[Fiber, ...]


@dataclass(frozen=True)
class PoolMetricsUpdate:
    kind: ClassVar[TabKind] = TabKind.POOL
    metrics: PoolMetrics


@dataclass(frozen=True)
class ConnectionMetricsUpdate:
    kind: ClassVar[TabKind] = TabKind.POOL
    metrics: ConnectionMetrics


@dataclass(frozen=True)
class PoolConfigUpdate:
    kind: ClassVar[TabKind] = TabKind.POOL
    config: PoolConfig


@dataclass(frozen=True)
class ActorTreeUpdate:
    kind: ClassVar[TabKind] = TabKind.ACTORS
    actors: tuple[ActorNode, ...]


@dataclass(frozen=True)
class ActorCountUpdate:
    kind: ClassVar[TabKind] = TabKind.ACTORS
    count: int


@dataclass(frozen=True)
class ProbeFailed:
    source: TabKind
    message: str


SnapshotUpdate = Union[
    FiberDumpUpdate,
    FiberTallyUpdate,
    PoolMetricsUpdate,
    ConnectionMetricsUpdate,
    PoolConfigUpdate,
    ActorTreeUpdate,
    ActorCountUpdate,
]
