"""
HTTP probes for the three data sources.

Each probe turns one round of requests into the snapshot updates the engine
understands. Probes run on poller threads and never touch the engine.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .events import (
    ActorCountUpdate,
    ActorTreeUpdate,
    ConnectionMetricsUpdate,
    FiberDumpUpdate,
    FiberTallyUpdate,
    PoolConfigUpdate,
    PoolMetricsUpdate,
    SnapshotUpdate,
    TabKind,
)
from .exceptions import ProbeError, SnapshotFormatError
from .models import ConnectionMetrics, PoolConfig, PoolMetrics, parse_actors, parse_fibers

logger = logging.getLogger(__name__)

EXECUTOR_ATTRIBUTES = ["ActiveThreads", "QueueSize", "MaxThreads", "MaxQueueSize"]
CONNECTION_POOL_ATTRIBUTES = [
    "ActiveConnections",
    "IdleConnections",
    "ThreadsAwaitingConnection",
    "TotalConnections",
]


class HttpProbe:
    """Shared HTTP plumbing: one session, bearer auth, timeouts, error mapping"""

    source: TabKind

    def __init__(self, url: str, timeout: float = 5.0, token: Optional[str] = None):
        self.url = url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'

    def _request(self, method: str, path: str = '', json: Any = None) -> Any:
        """Make HTTP request and return the decoded JSON body"""
        url = f'{self.url}{path}'
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout:
            raise ProbeError(self.source.value, f'request to {url} timed out after {self.timeout}s')
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ProbeError(self.source.value, f'{url} returned HTTP {status}', status_code=status)
        except requests.RequestException as e:
            raise ProbeError(self.source.value, f'request to {url} failed: {e}')

        try:
            return response.json()
        except ValueError:
            raise ProbeError(self.source.value, f'{url} did not return JSON')

    def poll(self) -> list[SnapshotUpdate]:
        raise NotImplementedError

    def close(self) -> None:
        self.session.close()


class FiberProbe(HttpProbe):
    """Fiber dump of a scheduler: ``GET {url}/fibers``"""

    source = TabKind.FIBERS

    def poll(self) -> list[SnapshotUpdate]:
        payload = self._request('GET', '/fibers')
        try:
            fibers = tuple(parse_fibers(payload))
        except SnapshotFormatError as e:
            raise ProbeError(self.source.value, f'malformed fiber dump: {e}')
        return [FiberDumpUpdate(fibers), FiberTallyUpdate(fibers)]


class ActorProbe(HttpProbe):
    """Actor hierarchy of an actor system: ``GET {url}/actors``"""

    source = TabKind.ACTORS

    def poll(self) -> list[SnapshotUpdate]:
        payload = self._request('GET', '/actors')
        try:
            actors = tuple(parse_actors(payload))
        except SnapshotFormatError as e:
            raise ProbeError(self.source.value, f'malformed actor tree: {e}')
        return [ActorTreeUpdate(actors), ActorCountUpdate(len(actors))]


class PoolProbe(HttpProbe):
    """Query executor and connection pool MBeans read through a Jolokia agent

    Usage:
        probe = PoolProbe('http://localhost:8778/jolokia', executor='db',
                          connection_pool='db-pool')
        updates = probe.poll()
    """

    source = TabKind.POOL

    def __init__(
        self,
        url: str,
        executor: str = 'AsyncExecutor',
        connection_pool: Optional[str] = None,
        timeout: float = 5.0,
        token: Optional[str] = None,
    ):
        super().__init__(url, timeout=timeout, token=token)
        self.executor = executor
        self.connection_pool = connection_pool

    @property
    def executor_mbean(self) -> str:
        return f'slick:type=AsyncExecutor,name={self.executor}'

    @property
    def connection_pool_mbean(self) -> Optional[str]:
        if not self.connection_pool:
            return None
        return f'com.zaxxer.hikari:type=Pool ({self.connection_pool})'

    def _read_requests(self) -> list[dict[str, Any]]:
        reads = [{'type': 'read', 'mbean': self.executor_mbean, 'attribute': EXECUTOR_ATTRIBUTES}]
        if self.connection_pool_mbean:
            reads.append({
                'type': 'read',
                'mbean': self.connection_pool_mbean,
                'attribute': CONNECTION_POOL_ATTRIBUTES,
            })
        return reads

    def _value(self, response: Any, mbean: str) -> dict[str, Any]:
        if not isinstance(response, dict):
            raise ProbeError(self.source.value, f'unexpected Jolokia response for {mbean}')
        status = response.get('status')
        if status != 200:
            error = response.get('error') or 'unknown error'
            raise ProbeError(self.source.value, f'{mbean}: {error}', status_code=status)
        value = response.get('value')
        if not isinstance(value, dict):
            raise ProbeError(self.source.value, f'{mbean}: attribute values missing')
        return value

    def _gauge(self, values: dict[str, Any], attribute: str) -> int:
        try:
            return int(values[attribute])
        except (KeyError, TypeError, ValueError):
            raise ProbeError(self.source.value, f'attribute {attribute} missing or not a number')

    def poll(self) -> list[SnapshotUpdate]:
        responses = self._request('POST', json=self._read_requests())
        if not isinstance(responses, list) or not responses:
            raise ProbeError(self.source.value, 'expected a list of Jolokia read responses')

        executor = self._value(responses[0], self.executor_mbean)
        updates: list[SnapshotUpdate] = [
            PoolMetricsUpdate(PoolMetrics(
                active_threads=self._gauge(executor, 'ActiveThreads'),
                queue_size=self._gauge(executor, 'QueueSize'),
            )),
            PoolConfigUpdate(PoolConfig(
                max_threads=self._gauge(executor, 'MaxThreads'),
                max_queue_size=self._gauge(executor, 'MaxQueueSize'),
            )),
        ]

        mbean = self.connection_pool_mbean
        if mbean:
            if len(responses) < 2:
                raise ProbeError(self.source.value, f'no response for {mbean}')
            pool = self._value(responses[1], mbean)
            updates.append(ConnectionMetricsUpdate(ConnectionMetrics(
                active=self._gauge(pool, 'ActiveConnections'),
                idle=self._gauge(pool, 'IdleConnections'),
                waiting=self._gauge(pool, 'ThreadsAwaitingConnection'),
                total=self._gauge(pool, 'TotalConnections'),
            )))

        logger.debug("Pool probe read %d MBeans from %s", len(responses), self.url)
        return updates
