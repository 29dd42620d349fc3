"""Dashboard state engine.

``DashboardEngine`` is the single mutable model behind the TUI. The control
loop feeds it snapshot updates and key presses; the renderer only reads it.
All mutation happens on the control-loop thread, so nothing here locks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Retention
from .events import (
    ActorCountUpdate,
    ActorTreeUpdate,
    ConnectionMetricsUpdate,
    FiberDumpUpdate,
    FiberTallyUpdate,
    Key,
    PoolConfigUpdate,
    PoolMetricsUpdate,
    SnapshotUpdate,
    TabKind,
)
from .exceptions import UnconfiguredSourceError
from .tabs import ActorTreeTab, FiberTab, PoolTab

logger = logging.getLogger(__name__)

TAB_TITLES = {
    TabKind.FIBERS: "Fibers",
    TabKind.POOL: "Pool",
    TabKind.ACTORS: "Actors",
}


@dataclass(frozen=True)
class Tab:
    kind: TabKind
    title: str


class TabSet:
    """Configured tabs in presentation order plus the active index."""

    def __init__(self, tabs: list[Tab]) -> None:
        self.tabs = list(tabs)
        self.index = 0

    def next(self) -> None:
        if self.tabs:
            self.index = (self.index + 1) % len(self.tabs)

    def previous(self) -> None:
        if not self.tabs:
            return
        if self.index > 0:
            self.index -= 1
        else:
            self.index = len(self.tabs) - 1

    @property
    def current(self) -> Tab | None:
        if not self.tabs:
            return None
        return self.tabs[self.index]

    def titles(self) -> list[str]:
        return [tab.title for tab in self.tabs]


class DashboardEngine:
    """Owns the tab set and at most one tab per data-source kind.

    A kind whose source was not configured has no tab for the whole run.
    Once ``should_quit`` is set, every mutation is ignored: updates that were
    already in flight may still be drained during shutdown.
    """

    def __init__(
        self,
        title: str = "probedash",
        *,
        fibers: bool = False,
        pool: bool = False,
        actors: bool = False,
        retention: Retention | None = None,
    ) -> None:
        retention = retention or Retention()
        self.title = title
        self.should_quit = False
        self.exit_reason: str | None = None

        tabs: list[Tab] = []
        for kind, enabled in ((TabKind.FIBERS, fibers), (TabKind.POOL, pool), (TabKind.ACTORS, actors)):
            if enabled:
                tabs.append(Tab(kind, TAB_TITLES[kind]))
        self.tabs = TabSet(tabs)

        self.fiber_tab = FiberTab(retention.fiber_tallies) if fibers else None
        self.pool_tab = PoolTab(retention.pool_metrics, retention.connection_metrics) if pool else None
        self.actor_tab = ActorTreeTab(retention.actor_counts) if actors else None

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def active_kind(self) -> TabKind | None:
        tab = self.tabs.current
        return tab.kind if tab else None

    @property
    def active_title(self) -> str | None:
        tab = self.tabs.current
        return tab.title if tab else None

    def titles(self) -> list[str]:
        return self.tabs.titles()

    # ------------------------------------------------------------------
    # Snapshot updates
    # ------------------------------------------------------------------

    def apply(self, update: SnapshotUpdate) -> None:
        """Route a snapshot update to the tab of its kind.

        Raises UnconfiguredSourceError if that kind has no tab; the collaborator
        delivering it is wired wrong.
        """
        if self.should_quit:
            logger.debug("Ignoring %s after quit", type(update).__name__)
            return

        if isinstance(update, (FiberDumpUpdate, FiberTallyUpdate)):
            tab = self._require(self.fiber_tab, TabKind.FIBERS)
            if isinstance(update, FiberDumpUpdate):
                tab.replace_fiber_dump(list(update.fibers))
            else:
                tab.append_tally(list(update.fibers))
        elif isinstance(update, (PoolMetricsUpdate, ConnectionMetricsUpdate, PoolConfigUpdate)):
            tab = self._require(self.pool_tab, TabKind.POOL)
            if isinstance(update, PoolMetricsUpdate):
                tab.append_metrics(update.metrics)
            elif isinstance(update, ConnectionMetricsUpdate):
                tab.append_connections(update.metrics)
            else:
                tab.replace_config(update.config)
        elif isinstance(update, (ActorTreeUpdate, ActorCountUpdate)):
            tab = self._require(self.actor_tab, TabKind.ACTORS)
            if isinstance(update, ActorTreeUpdate):
                tab.replace_tree(list(update.actors))
            else:
                tab.append_count(update.count)
        else:
            raise TypeError(f"not a snapshot update: {update!r}")

    @staticmethod
    def _require(tab, kind: TabKind):
        if tab is None:
            raise UnconfiguredSourceError(kind.value)
        return tab

    # ------------------------------------------------------------------
    # Keyboard navigation
    # ------------------------------------------------------------------

    def dispatch(self, key: Key) -> None:
        if self.should_quit:
            return
        if key == Key.UP:
            self.on_up()
        elif key == Key.DOWN:
            self.on_down()
        elif key == Key.LEFT:
            self.on_left()
        elif key == Key.RIGHT:
            self.on_right()
        elif key == Key.PAGE_UP:
            self.on_page_up()
        elif key == Key.PAGE_DOWN:
            self.on_page_down()
        elif key == Key.QUIT:
            self.quit()

    def on_key(self, char: str) -> None:
        if char == "q":
            self.quit()

    def on_up(self) -> None:
        if self.should_quit:
            return
        kind = self.active_kind
        if kind == TabKind.FIBERS:
            self.fiber_tab.select_previous()
        elif kind == TabKind.ACTORS:
            self.actor_tab.select_previous()

    def on_down(self) -> None:
        if self.should_quit:
            return
        kind = self.active_kind
        if kind == TabKind.FIBERS:
            self.fiber_tab.select_next()
        elif kind == TabKind.ACTORS:
            self.actor_tab.select_next()

    def on_left(self) -> None:
        if not self.should_quit:
            self.tabs.previous()

    def on_right(self) -> None:
        if not self.should_quit:
            self.tabs.next()

    def on_page_up(self) -> None:
        if not self.should_quit and self.active_kind == TabKind.FIBERS:
            self.fiber_tab.scroll_up()

    def on_page_down(self) -> None:
        if not self.should_quit and self.active_kind == TabKind.FIBERS:
            self.fiber_tab.scroll_down()

    def quit(self, reason: str | None = None) -> None:
        """Set the quit flag. The first reason given wins."""
        if self.should_quit:
            return
        self.should_quit = True
        self.exit_reason = reason
        logger.info("Quit requested%s", f": {reason}" if reason else "")
