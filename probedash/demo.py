"""Synthetic probes for ``--demo`` mode.

They produce the same updates as the HTTP probes, drifting a little on every
poll so the sparklines move. Each probe owns a seeded ``random.Random`` so a
given seed always replays the same sequence.
"""

from __future__ import annotations

import random

from .events import (
    ActorCountUpdate,
    ActorTreeUpdate,
    ConnectionMetricsUpdate,
    FiberDumpUpdate,
    FiberTallyUpdate,
    PoolConfigUpdate,
    PoolMetricsUpdate,
    SnapshotUpdate,
)
from .models import ActorNode, ConnectionMetrics, Fiber, FiberStatus, PoolConfig, PoolMetrics

DEMO_MAX_THREADS = 20
DEMO_MAX_QUEUE_SIZE = 1000
DEMO_POOL_SIZE = 10

_FRAMES = [
    "zio.internal.FiberContext.evaluateNow(FiberContext.scala:{line})",
    "app.http.Server.serve(Server.scala:{line})",
    "app.db.Repository.query(Repository.scala:{line})",
    "zio.ZIO.flatMap(ZIO.scala:{line})",
    "app.jobs.Scheduler.tick(Scheduler.scala:{line})",
]

_ACTORS = [
    (1, None, "user"),
    (2, 1, "http-server"),
    (3, 2, "connection-1"),
    (4, 2, "connection-2"),
    (5, 1, "repository"),
    (6, 5, "writer"),
    (7, None, "system"),
    (8, 7, "log1-Logging$DefaultLogger"),
    (9, 7, "deadLetterListener"),
]


class DemoFiberProbe:
    def __init__(self, seed: int = 0) -> None:
        self._rng = random.Random(seed)
        self._tick = 0

    def _dump(self, fiber_id: int, status: FiberStatus) -> str:
        depth = self._rng.randint(2, 12)
        lines = [f"Fiber:Id({fiber_id}) was {status.value.lower()}", "", "Fiber trace:"]
        for _ in range(depth):
            frame = self._rng.choice(_FRAMES).format(line=self._rng.randint(10, 900))
            lines.append(f"  a {frame}")
        return "\n".join(lines)

    def poll(self) -> list[SnapshotUpdate]:
        self._tick += 1
        count = 6 + self._rng.randint(0, 8)
        fibers: list[Fiber] = []
        for fiber_id in range(1, count + 1):
            parent_id = None
            if fiber_id > 2 and self._rng.random() < 0.7:
                parent_id = self._rng.randint(1, fiber_id - 1)
            status = self._rng.choices(
                list(FiberStatus), weights=[3, 5, 1, 1])[0]
            fibers.append(Fiber(fiber_id, parent_id, status, self._dump(fiber_id, status)))
        snapshot = tuple(fibers)
        return [FiberDumpUpdate(snapshot), FiberTallyUpdate(snapshot)]


class DemoPoolProbe:
    def __init__(self, seed: int = 0, with_connections: bool = True) -> None:
        self._rng = random.Random(seed)
        self._with_connections = with_connections
        self._active = DEMO_MAX_THREADS // 2

    def poll(self) -> list[SnapshotUpdate]:
        self._active = max(0, min(DEMO_MAX_THREADS, self._active + self._rng.randint(-3, 3)))
        queued = 0 if self._active < DEMO_MAX_THREADS else self._rng.randint(0, 200)
        updates: list[SnapshotUpdate] = [
            PoolMetricsUpdate(PoolMetrics(active_threads=self._active, queue_size=queued)),
            PoolConfigUpdate(PoolConfig(DEMO_MAX_THREADS, DEMO_MAX_QUEUE_SIZE)),
        ]
        if self._with_connections:
            active = min(DEMO_POOL_SIZE, self._active)
            waiting = max(0, self._active - DEMO_POOL_SIZE)
            updates.append(ConnectionMetricsUpdate(ConnectionMetrics(
                active=active,
                idle=DEMO_POOL_SIZE - active,
                waiting=waiting,
                total=DEMO_POOL_SIZE,
            )))
        return updates


class DemoActorProbe:
    def __init__(self, seed: int = 0) -> None:
        self._rng = random.Random(seed)

    def poll(self) -> list[SnapshotUpdate]:
        actors = [ActorNode(actor_id, parent_id, name) for actor_id, parent_id, name in _ACTORS]
        next_id = len(_ACTORS) + 1
        for _ in range(self._rng.randint(0, 5)):
            actors.append(ActorNode(next_id, 2, f"connection-{next_id - 7}"))
            next_id += 1
        snapshot = tuple(actors)
        return [ActorTreeUpdate(snapshot), ActorCountUpdate(len(snapshot))]
