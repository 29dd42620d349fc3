"""Per-source tab state: one class per data-source kind.

Each tab holds the current snapshot's derived display state plus rolling
history for its sparklines. Tabs never read each other's state.
"""

from __future__ import annotations

from .config import DEFAULT_RETENTION
from .history import BoundedHistory
from .models import ActorNode, ConnectionMetrics, Fiber, PoolConfig, PoolMetrics, StatusTally
from .selection import CyclicSelectionList
from .tree import render_forest


def dump_lines(text: str) -> list[str]:
    """Split a dump on newlines only; a trailing newline does not open a new line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class DumpViewer:
    """Scroll position over the currently displayed fiber dump."""

    def __init__(self) -> None:
        self.text = ""
        self.offset = 0
        self.line_count = 0

    def show(self, text: str) -> None:
        self.text = text
        self.offset = 0
        self.line_count = len(dump_lines(text))

    def scroll_up(self) -> None:
        if self.offset > 0:
            self.offset -= 1

    def scroll_down(self) -> None:
        if self.offset < self.line_count:
            self.offset += 1


class FiberTab:
    """Fiber tree of one scheduler, the dump of the selected fiber and a
    history of status tallies."""

    def __init__(self, tally_capacity: int = DEFAULT_RETENTION["fiber_tallies"]) -> None:
        self.fibers: CyclicSelectionList[str] = CyclicSelectionList()
        self.dumps: list[str] = []
        self.viewer = DumpViewer()
        self.tallies: BoundedHistory[StatusTally] = BoundedHistory(tally_capacity)

    @property
    def selected_dump(self) -> str:
        return self.viewer.text

    def replace_fiber_dump(self, fibers: list[Fiber]) -> None:
        """Rebuild the tree from a fresh snapshot and select its first fiber."""
        rendered = render_forest(fibers, with_status=True)
        self.fibers.replace(label for label, _ in rendered)
        self.dumps = [fiber.dump for _, fiber in rendered]
        self._on_fiber_change()

    def append_tally(self, fibers: list[Fiber]) -> None:
        self.tallies.append(StatusTally.of(fibers))

    def select_next(self) -> None:
        self.fibers.next()
        self._on_fiber_change()

    def select_previous(self) -> None:
        self.fibers.previous()
        self._on_fiber_change()

    def scroll_up(self) -> None:
        self.viewer.scroll_up()

    def scroll_down(self) -> None:
        self.viewer.scroll_down()

    def _on_fiber_change(self) -> None:
        index = self.fibers.selected
        self.viewer.show(self.dumps[index] if index is not None else "")


class PoolTab:
    """Connection-pool gauges. Nothing here is navigable."""

    def __init__(
        self,
        metrics_capacity: int = DEFAULT_RETENTION["pool_metrics"],
        connections_capacity: int = DEFAULT_RETENTION["connection_metrics"],
    ) -> None:
        self.metrics: BoundedHistory[PoolMetrics] = BoundedHistory(metrics_capacity)
        self.connections: BoundedHistory[ConnectionMetrics] = BoundedHistory(connections_capacity)
        self.has_connections = False
        self.config = PoolConfig()

    def append_metrics(self, metrics: PoolMetrics) -> None:
        self.metrics.append(metrics)

    def append_connections(self, metrics: ConnectionMetrics) -> None:
        self.has_connections = True
        self.connections.append(metrics)

    def replace_config(self, config: PoolConfig) -> None:
        self.config = config


class ActorTreeTab:
    """Actor hierarchy of one actor system plus a history of actor counts."""

    def __init__(self, count_capacity: int = DEFAULT_RETENTION["actor_counts"]) -> None:
        self.actors: CyclicSelectionList[str] = CyclicSelectionList()
        self.nodes: list[ActorNode] = []
        self.counts: BoundedHistory[int] = BoundedHistory(count_capacity)

    @property
    def selected_actor(self) -> ActorNode | None:
        index = self.actors.selected
        return self.nodes[index] if index is not None else None

    def replace_tree(self, actors: list[ActorNode]) -> None:
        rendered = render_forest(actors)
        self.actors.replace(label for label, _ in rendered)
        self.nodes = [node for _, node in rendered]

    def append_count(self, count: int) -> None:
        self.counts.append(count)

    def select_next(self) -> None:
        self.actors.next()

    def select_previous(self) -> None:
        self.actors.previous()
