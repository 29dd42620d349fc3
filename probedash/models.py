"""Snapshot records delivered by the probes.

Every record is a frozen dataclass so it can cross from a poller thread to the
control loop without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import SnapshotFormatError


class FiberStatus(Enum):
    RUNNING = "Running"
    SUSPENDED = "Suspended"
    FINISHING = "Finishing"
    DONE = "Done"

    @classmethod
    def parse(cls, raw: Any) -> "FiberStatus":
        """Accept either the display name or any casing of it ("running", "DONE")."""
        if isinstance(raw, str):
            for status in cls:
                if status.value.lower() == raw.strip().lower():
                    return status
        raise SnapshotFormatError(f"unknown fiber status: {raw!r}")


def _int_field(data: dict[str, Any], key: str, *, required: bool = True) -> int | None:
    value = data.get(key)
    if value is None:
        if required:
            raise SnapshotFormatError(f"missing field {key!r}")
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotFormatError(f"field {key!r} must be an integer, got {value!r}")
    return value


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise SnapshotFormatError(f"{what} must be an object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class Fiber:
    id: int
    parent_id: int | None
    status: FiberStatus
    dump: str

    @property
    def tag(self) -> str:
        return str(self.id)

    @classmethod
    def from_dict(cls, data: Any) -> "Fiber":
        data = _require_mapping(data, "fiber")
        dump = data.get("dump")
        if dump is None:
            dump = ""
        return cls(
            id=_int_field(data, "id"),
            parent_id=_int_field(data, "parent_id", required=False),
            status=FiberStatus.parse(data.get("status")),
            dump=dump if isinstance(dump, str) else str(dump),
        )


@dataclass(frozen=True)
class ActorNode:
    id: int
    parent_id: int | None
    name: str

    @property
    def tag(self) -> str:
        return self.name or str(self.id)

    @classmethod
    def from_dict(cls, data: Any) -> "ActorNode":
        data = _require_mapping(data, "actor")
        return cls(
            id=_int_field(data, "id"),
            parent_id=_int_field(data, "parent_id", required=False),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class StatusTally:
    """Number of fibers per status in one snapshot."""

    done: int = 0
    suspended: int = 0
    running: int = 0
    finishing: int = 0

    @classmethod
    def of(cls, fibers: list[Fiber]) -> "StatusTally":
        counts = {status: 0 for status in FiberStatus}
        for fiber in fibers:
            counts[fiber.status] += 1
        return cls(
            done=counts[FiberStatus.DONE],
            suspended=counts[FiberStatus.SUSPENDED],
            running=counts[FiberStatus.RUNNING],
            finishing=counts[FiberStatus.FINISHING],
        )

    @property
    def total(self) -> int:
        return self.done + self.suspended + self.running + self.finishing


@dataclass(frozen=True)
class PoolMetrics:
    """Gauges of the query-execution thread pool."""

    active_threads: int
    queue_size: int


@dataclass(frozen=True)
class ConnectionMetrics:
    """Gauges of the secondary connection pool, when one is present."""

    active: int
    idle: int
    waiting: int
    total: int


@dataclass(frozen=True)
class PoolConfig:
    max_threads: int = 0
    max_queue_size: int = 0


def parse_fibers(payload: Any) -> list[Fiber]:
    if not isinstance(payload, list):
        raise SnapshotFormatError("fiber snapshot must be a list")
    return [Fiber.from_dict(item) for item in payload]


def parse_actors(payload: Any) -> list[ActorNode]:
    if not isinstance(payload, list):
        raise SnapshotFormatError("actor snapshot must be a list")
    return [ActorNode.from_dict(item) for item in payload]
